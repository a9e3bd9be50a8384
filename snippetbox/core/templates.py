"""Shared template configuration for web routes"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi.templating import Jinja2Templates

# Get package directory
PACKAGE_DIR = Path(__file__).parent.parent


def human_date(value: Optional[datetime]) -> str:
    """Format a timestamp as e.g. "Jul 19 2023 at 10:15"; empty for a missing value."""
    if value is None:
        return ""
    return value.strftime("%b %d %Y at %H:%M")


def create_templates(directory: Path = PACKAGE_DIR / "templates") -> Jinja2Templates:
    """Create a template set with the application's filters registered."""
    env_templates = Jinja2Templates(directory=str(directory))
    env_templates.env.filters["human_date"] = human_date
    return env_templates


# Create shared templates instance
templates = create_templates()

# Export for use in routes
__all__ = ["templates", "create_templates", "human_date"]
