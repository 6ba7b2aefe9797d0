from pydantic import BaseModel, ConfigDict


class BaseGolfModel(BaseModel):
    """Shared configuration: assignments are re-validated."""
    model_config = ConfigDict(validate_assignment=True)
