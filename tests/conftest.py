"""Shared pytest configuration for vstat tests."""


def pytest_addoption(parser):
    parser.addoption(
        "--hw",
        action="store_true",
        default=False,
        help="Run hardware-in-the-loop tests (requires a capture chip connected)",
    )
