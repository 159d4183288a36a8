#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import pathlib

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from debugfmt.pretty import create_custom_settings
from debugfmt.settings import Settings


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def custom_settings() -> Settings:
    """Fresh settings layer on top of the process-wide defaults."""
    return create_custom_settings()


@pytest.fixture
def text_file(tmp_path: pathlib.Path):
    """Fixture to create a text file with given name and content."""

    def _create_file(name: str = "report.txt", content: str = "hello") -> pathlib.Path:
        file_path = tmp_path / name
        file_path.write_text(content)
        return file_path

    return _create_file
