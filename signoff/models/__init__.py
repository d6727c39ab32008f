from signoff.models.review import (  # noqa: F401
    ActivityLog,
    Asset,
    Event,
    TextGroup,
    TextItem,
    TextSection,
)
