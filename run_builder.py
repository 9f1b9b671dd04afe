from __future__ import annotations

import os
import signal
import subprocess
import sys
import time
import webbrowser
from pathlib import Path
from shutil import which


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def _run_with_env(cmd: list[str], *, cwd: Path, env_overrides: dict[str, str]) -> subprocess.Popen:
    env = os.environ.copy()
    env.update(env_overrides)
    return subprocess.Popen(
        cmd,
        cwd=str(cwd),
        env=env,
        stdout=None,
        stderr=None,
        shell=False,
    )


def _npm_cmd() -> str:
    # On Windows, `npm` is typically a `npm.cmd` shim; CreateProcess can't execute `.cmd`
    # unless we either use shell=True or invoke the `.cmd` explicitly.
    if sys.platform.startswith("win"):
        found = which("npm.cmd") or which("npm.exe") or which("npm")
    else:
        found = which("npm")
    if not found:
        raise FileNotFoundError("npm not found on PATH. Install Node.js to build the client.")
    return found


def _build_client(client_dir: Path) -> int:
    if not (client_dir / "node_modules").exists():
        print("[run_builder] Installing client dependencies (npm install)...")
        res = subprocess.run([_npm_cmd(), "install"], cwd=str(client_dir), shell=False)
        if res.returncode != 0:
            return res.returncode
    print("[run_builder] Building client (npm run build)...")
    res = subprocess.run([_npm_cmd(), "run", "build"], cwd=str(client_dir), shell=False)
    return res.returncode


def main() -> int:
    root = _repo_root()
    port = os.environ.get("PORT", "5001").strip() or "5001"

    print("[run_builder] Starting PitchPerfect")

    client_dir = root / "client"
    if (client_dir / "package.json").exists():
        try:
            code = _build_client(client_dir)
        except FileNotFoundError as e:
            print(f"[run_builder] Client build skipped: {e}")
            code = 0
        if code != 0:
            return code
    else:
        print("[run_builder] No client/ workspace found; serving the API only.")

    backend_cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "pitchperfect.asgi:app",
        "--app-dir",
        str(root / "apps" / "backend"),
        "--port",
        port,
    ]
    if os.environ.get("RELOAD", "").strip() in ("1", "true", "yes"):
        backend_cmd.append("--reload")
    backend_proc = _run_with_env(backend_cmd, cwd=root, env_overrides={"PORT": port})

    time.sleep(0.5)
    print("")
    print(f"[run_builder] Builder:     http://localhost:{port}")
    print(f"[run_builder] Templates:   http://localhost:{port}/api/templates")
    print("")
    print("[run_builder] Press Ctrl+C to stop.")

    if os.environ.get("OPEN_BROWSER", "1").strip() not in ("0", "false", "no"):
        try:
            webbrowser.open(f"http://localhost:{port}", new=1)
        except webbrowser.Error:
            pass

    try:
        while True:
            code = backend_proc.poll()
            if code is not None:
                print(f"[run_builder] Backend exited with code {code}.")
                return code
            time.sleep(0.2)
    except KeyboardInterrupt:
        return 0
    finally:
        if backend_proc.poll() is None:
            if sys.platform.startswith("win"):
                backend_proc.terminate()
            else:
                backend_proc.send_signal(signal.SIGTERM)
            try:
                backend_proc.wait(timeout=3)
            except subprocess.TimeoutExpired:
                backend_proc.kill()


if __name__ == "__main__":
    raise SystemExit(main())
