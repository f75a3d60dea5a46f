"""
Schema base class
"""
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base for request payloads that have no table behind them"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,  # trim incoming strings
        use_enum_values=True,
    )
