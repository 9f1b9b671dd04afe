from __future__ import annotations


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_list_templates(client):
    r = client.get("/api/templates")
    assert r.status_code == 200
    templates = r.json()
    ids = [t["id"] for t in templates]
    assert "business-pitch" in ids
    assert len(ids) == len(set(ids))
    for t in templates:
        assert {"id", "name", "description", "slides"} <= set(t)


def test_get_template(client):
    r = client.get("/api/templates/product-demo")
    assert r.status_code == 200
    assert r.json()["name"] == "Product Demo"
    assert client.get("/api/templates/does-not-exist").status_code == 404


def test_upload_returns_file_description(client, settings):
    r = client.post("/api/upload", files={"file": ("My Clip.mp4", b"\x00\x01video", "video/mp4")})

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    info = body["file"]
    assert info["originalname"] == "My Clip.mp4"
    assert info["filename"].endswith("-My_Clip.mp4")
    assert info["url"] == f"/uploads/{info['filename']}"
    assert info["size"] == 7
    assert info["mimetype"] == "video/mp4"
    assert (settings.upload_dir / info["filename"]).read_bytes() == b"\x00\x01video"


def test_uploaded_files_are_served(client):
    info = client.post("/api/upload", files={"file": ("a.png", b"pngbytes", "image/png")}).json()["file"]
    r = client.get(info["url"])
    assert r.status_code == 200
    assert r.content == b"pngbytes"


def test_upload_names_do_not_collide(client):
    a = client.post("/api/upload", files={"file": ("same.png", b"1", "image/png")}).json()["file"]
    b = client.post("/api/upload", files={"file": ("same.png", b"2", "image/png")}).json()["file"]
    assert a["filename"] != b["filename"]


def test_upload_rejects_disallowed_type(client, settings):
    r = client.post("/api/upload", files={"file": ("run.exe", b"MZ", "application/x-msdownload")})
    assert r.status_code == 400
    assert r.json() == {"error": "Only image, video, and document files are allowed!"}
    assert list(settings.upload_dir.iterdir()) == []


def test_upload_rejects_oversized_file(client, settings):
    big = b"0" * (settings.max_upload_bytes + 1)
    r = client.post("/api/upload", files={"file": ("huge.png", big, "image/png")})
    assert r.status_code == 413
    assert list(settings.upload_dir.iterdir()) == []


def test_upload_requires_file(client):
    r = client.post("/api/upload")
    assert r.status_code == 400
    assert r.json() == {"error": "No file uploaded"}


def test_app_factory_module_builds_no_app_on_import():
    import pitchperfect.main as main_module

    assert not hasattr(main_module, "app")
    assert callable(main_module.create_app)
