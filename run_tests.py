#!/usr/bin/env python3
"""
Test runner for the DevChecklist.AI API.

Wraps pytest with the suite layout under ``tests/`` (unit, api, e2e), the
``slow`` marker used by full request-chain tests, and coverage for the ``app``
and ``models`` packages.
"""

import argparse
import os
import subprocess
import sys

# name -> (directory, banner, extra pytest options)
SUITES = {
    "unit": ("tests/unit/", "Unit tests: services, adapters, config, security", []),
    "api": ("tests/api/", "API tests: controllers behind the ASGI client", ["--tb=short"]),
    "e2e": ("tests/e2e/", "End-to-end journeys: register, check, manage tasks", ["--tb=short", "-x"]),
}

COVERAGE_OPTIONS = ["--cov=app", "--cov=models", "--cov-report=term-missing"]


def setup_test_environment():
    """Point the app at the test database and strip real credentials."""
    os.environ.setdefault("TESTING", "true")
    os.environ.setdefault("ENVIRONMENT", "testing")
    os.environ.setdefault("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test.db")
    os.environ.setdefault("DATABASE_URL", os.environ["TEST_DATABASE_URL"])

    # Todoist and Gemini are faked in the suites; a real key must never reach them
    for key in ("TODOIST_API_KEY", "GOOGLE_API_KEY", "GOOGLE_CLIENT_ID"):
        os.environ[key] = ""


def pytest_command(targets, verbose=False, coverage=False, skip_slow=False, extra=()):
    cmd = [sys.executable, "-m", "pytest", *targets, *extra]
    if verbose:
        cmd.append("-v")
    if skip_slow:
        cmd.extend(["-m", "not slow"])
    if coverage:
        cmd.extend(COVERAGE_OPTIONS)
    return cmd


def run(cmd, banner):
    print(f"\n{'=' * 60}\n🚀 {banner}\n{'=' * 60}")
    print(f"Running: {' '.join(cmd)}")
    return subprocess.run(cmd).returncode


def run_suites(names, verbose=False, coverage=False, skip_slow=False):
    """Run each named suite separately and print a pass/fail table."""
    results = []
    for name in names:
        path, banner, extra = SUITES[name]
        cmd = pytest_command([path], verbose, coverage and name == "unit", skip_slow, extra)
        results.append((name, run(cmd, banner)))

    if len(results) > 1:
        print(f"\n{'=' * 60}\n📊 TEST RESULTS SUMMARY\n{'=' * 60}")
        for name, code in results:
            print(f"{name:10} {'✅ PASSED' if code == 0 else '❌ FAILED'}")

    return sum(1 for _, code in results if code != 0)


def check_test_dependencies():
    missing = []
    for module in ("pytest", "pytest_asyncio", "pytest_cov", "factory", "httpx", "aiosqlite"):
        try:
            __import__(module)
        except ImportError:
            missing.append(module)

    if missing:
        print(f"❌ Missing test dependencies: {', '.join(missing)}")
        print('Run: pip install -e ".[test]"')
        return False
    return True


def main():
    parser = argparse.ArgumentParser(
        description="DevChecklist.AI API test runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_tests.py --all                  # unit, api and e2e in turn
  python run_tests.py --all --fast           # same, skipping @pytest.mark.slow
  python run_tests.py --api
  python run_tests.py --coverage             # one run over tests/ with an HTML report
  python run_tests.py --specific tests/unit/test_todoist_service.py
  python run_tests.py --marker slow
        """,
    )

    suites = parser.add_mutually_exclusive_group()
    suites.add_argument("--all", action="store_true", help="Run every suite")
    for name in SUITES:
        suites.add_argument(f"--{name}", action="store_true", help=f"Run the {name} suite")
    suites.add_argument("--coverage", action="store_true", help="Single run over tests/ with coverage")
    suites.add_argument("--specific", type=str, help="Run one test file or node id")
    suites.add_argument("--marker", type=str, help="Run tests with the given marker")

    parser.add_argument("--fast", action="store_true", help="Skip tests marked slow")
    parser.add_argument("--no-coverage", action="store_true", help="No coverage for the unit suite")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--check-deps", action="store_true", help="Only check test dependencies")
    args = parser.parse_args()

    if not check_test_dependencies():
        return 1
    if args.check_deps:
        return 0

    setup_test_environment()

    if args.all:
        exit_code = run_suites(list(SUITES), args.verbose, not args.no_coverage, args.fast)
    elif args.coverage:
        cmd = pytest_command(["tests/"], args.verbose, True, args.fast, ["--cov-report=html"])
        exit_code = run(cmd, "Coverage over every suite")
    elif args.specific:
        exit_code = run(pytest_command([args.specific], args.verbose, extra=["--tb=short"]), args.specific)
    elif args.marker:
        cmd = pytest_command([], args.verbose, extra=["-m", args.marker, "--tb=short"])
        exit_code = run(cmd, f"Tests marked {args.marker}")
    else:
        selected = [name for name in SUITES if getattr(args, name)]
        if not selected:
            parser.print_help()
            return 1
        exit_code = run_suites(selected, args.verbose, not args.no_coverage, args.fast)

    print("\n🎉 All tests passed!" if exit_code == 0 else f"\n💥 Failures: {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
