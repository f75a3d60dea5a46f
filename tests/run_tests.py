#!/usr/bin/env python
"""
Run the test suite

Works from any directory and uses the current Python interpreter
"""
import os
import sys
import subprocess


def main():
    script_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(script_dir)

    os.chdir(project_root)

    print(f"Project: {project_root}")
    print(f"Python:  {sys.executable}")
    print("-" * 60)

    cmd = [sys.executable, "-m", "pytest", "tests/", "-v", "--tb=short"]

    # Extra arguments replace the default test path
    if len(sys.argv) > 1:
        cmd = [sys.executable, "-m", "pytest"] + sys.argv[1:]

    print(f"Running: {' '.join(cmd)}")
    print("=" * 60)

    result = subprocess.run(cmd)
    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
