"""Nox configuration for WebApp Performance Alerts development automation.

This file defines automated development tasks including linting, testing,
formatting, and previewing the Azure request bodies.
"""

import nox

# Python versions to test against
PYTHON_VERSIONS = ["3.11"]

# Default sessions to run when no specific session is requested
nox.options.sessions = ["lint", "test", "coverage"]


@nox.session(python=PYTHON_VERSIONS)
def lint(session):
    """Run linting with ruff and mypy."""
    session.install("poetry")
    session.run("poetry", "install", "--all-extras")

    session.run("poetry", "run", "ruff", "check", "src", "tests")
    session.run("poetry", "run", "mypy", "src")

    session.log("✅ Linting completed successfully")


@nox.session(python=PYTHON_VERSIONS)
def format_code(session):
    """Format code with black and isort."""
    session.install("poetry")
    session.run("poetry", "install", "--all-extras")

    session.run("poetry", "run", "black", "src", "tests")
    session.run("poetry", "run", "isort", "src", "tests")
    session.run("poetry", "run", "ruff", "check", "--fix", "src", "tests")

    session.log("✅ Code formatting completed")


@nox.session(python=PYTHON_VERSIONS)
def test(session):
    """Run the test suite with pytest."""
    session.install("poetry")
    session.run("poetry", "install", "--all-extras")

    session.run(
        "poetry", "run", "pytest",
        "tests/",
        "-v",
        "--tb=short",
        "--strict-markers",
        "-m", "not slow",
    )

    session.log("✅ Unit tests completed successfully")


@nox.session(python=PYTHON_VERSIONS)
def coverage(session):
    """Run tests with coverage reporting."""
    session.install("poetry")
    session.run("poetry", "install", "--all-extras")

    session.run(
        "poetry", "run", "pytest",
        "tests/",
        "--cov=webapp_alerts",
        "--cov-report=term-missing",
        "--cov-report=xml:coverage.xml",
        "--cov-fail-under=80",
        "-m", "not slow",
    )

    session.log("✅ Coverage analysis completed")


@nox.session(python=PYTHON_VERSIONS)
def plan(session):
    """Write the request bodies the sample would send.

    Examples:
      nox -s plan
      nox -s plan -- --config-path config/prod.yml --out-dir build/plan-prod
    """
    session.install("poetry")
    session.run("poetry", "install")
    args = session.posargs or ["--out-dir", "build/plan"]
    session.run("poetry", "run", "webapp-alerts", "plan", *args)
    session.log("✅ Request bodies generated")


@nox.session(python=PYTHON_VERSIONS)
def sample(session):
    """Provision and tear down the sample resources (requires Azure credentials).

    Reads TENANT_ID, CLIENT_ID, CLIENT_SECRET and SUBSCRIPTION_ID from the environment.
    """
    session.install("poetry")
    session.run("poetry", "install")
    session.run("poetry", "run", "webapp-alerts", "run", *session.posargs)
    session.log("✅ Sample run finished")

