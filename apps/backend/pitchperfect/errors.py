from __future__ import annotations

from fastapi.responses import JSONResponse


class PitchPerfectError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PresentationNotFound(PitchPerfectError):
    status_code = 404

    def __init__(self, presentation_id: str) -> None:
        super().__init__("Presentation not found")
        self.presentation_id = presentation_id


class TemplateNotFound(PitchPerfectError):
    status_code = 404

    def __init__(self, template_id: str) -> None:
        super().__init__("Template not found")
        self.template_id = template_id


class InvalidPresentation(PitchPerfectError):
    status_code = 400


class ExportFailed(PitchPerfectError):
    status_code = 500


class UploadRejected(PitchPerfectError):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


def error_response(err: PitchPerfectError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content={"error": err.message})
