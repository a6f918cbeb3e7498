from pydantic import BaseModel


class DegradedResponse(BaseModel):
    error: str = "Internal Server Error"
    message: str
