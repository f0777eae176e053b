import argparse
import os
import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent


def run_cmd(cmd, cwd=None, env=None):
    print("$", " ".join(cmd))
    return subprocess.Popen(cmd, cwd=cwd, env=env or os.environ.copy())


def ensure_deps():
    if not (ROOT / "pyproject.toml").exists():
        return
    subprocess.check_call([sys.executable, "-m", "pip", "install", "-e", str(ROOT)])


def start_api(port: int, dev: bool = False):
    args = [sys.executable, "-m", "uvicorn", "wgconsole.main:app", "--host", "0.0.0.0", "--port", str(port)]
    if dev:
        args.append("--reload")
    return run_cmd(args, cwd=str(ROOT))


def main():
    parser = argparse.ArgumentParser(description="Run the WireGuard console locally")
    parser.add_argument("--dev", action="store_true", help="Run in development mode (Uvicorn reload)")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--skip-install", action="store_true", help="Do not pip install the project first")
    args = parser.parse_args()

    if not args.skip_install:
        ensure_deps()

    proc = start_api(args.port, dev=args.dev)
    print(f"Running. API: http://localhost:{args.port}")
    try:
        proc.wait()
    except KeyboardInterrupt:
        pass
    finally:
        try:
            proc.terminate()
        except OSError:
            pass


if __name__ == "__main__":
    main()
