"""autorest - a generic REST API over any relational database.

Tables and columns are discovered at request time and turned into
parameterized SQL statements on the fly.

Example:
    from autorest.api.main import create_app
    from autorest.core.config import Settings

    app = create_app(Settings(database_url="sqlite:///./addressbook.db"))
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
