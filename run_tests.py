#!/usr/bin/env python3
"""
Run the TENS simulation test suite.

    python run_tests.py --unit          # engine components only
    python run_tests.py --integration   # HTTP API only
    python run_tests.py --coverage --html
"""
import argparse
import subprocess
import sys


def build_pytest_args(args):
    cmd = [sys.executable, "-m", "pytest"]
    if args.verbose:
        cmd.append("-v")
    if args.suite:
        cmd.extend(["-m", args.suite])
    if args.keyword:
        cmd.extend(["-k", args.keyword])
    if args.coverage or args.html:
        cmd.extend(["--cov=tens_simulator", "--cov-report=term-missing"])
        if args.html:
            cmd.append("--cov-report=html")
    return cmd


def main():
    parser = argparse.ArgumentParser(description="Run TENS simulation tests")
    suite = parser.add_mutually_exclusive_group()
    suite.add_argument("--unit", dest="suite", action="store_const", const="unit", help="Unit tests only")
    suite.add_argument("--integration", dest="suite", action="store_const", const="integration",
                       help="Integration tests only")
    parser.add_argument("--keyword", "-k", help="pytest keyword expression")
    parser.add_argument("--coverage", action="store_true", help="Terminal coverage report")
    parser.add_argument("--html", action="store_true", help="Also write an HTML coverage report to htmlcov/")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    cmd = build_pytest_args(args)
    print("Running:", " ".join(cmd))
    return subprocess.run(cmd).returncode


if __name__ == "__main__":
    sys.exit(main())
