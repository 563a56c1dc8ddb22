# models/gateway.py
from pydantic import BaseModel, Field
from typing import Optional


class ChatRequest(BaseModel):
    message: str = Field(..., description="Free-text chat message from the user")


class ChatResponse(BaseModel):
    message: str = Field(..., description="The message as received")
    extractedIntent: str = Field(..., description="Intent line produced by the model")
    userFriendlyResponse: str = Field(..., description="Formatted reply for the user")


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: Optional[str] = None
