"""
Request/response bodies for the HTTP API

Request fields are optional on purpose: a missing field is reported by the
pipelines as blank input (HTTP 400 with a message), not as a schema error.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel


class GenerateEmailIn(BaseModel):
    prompt: Optional[str] = None


class GenerateEmailOut(BaseModel):
    success: bool = True
    subject: str
    emailBody: str
    fullContent: str
    parseDegraded: bool = False


class SendEmailIn(BaseModel):
    recipients: Optional[str] = None
    subject: Optional[str] = None
    emailBody: Optional[str] = None


class SendEmailOut(BaseModel):
    success: bool = True
    message: str = "Email sent successfully"
    messageId: str
    recipients: List[str]


class HealthOut(BaseModel):
    status: str = "OK"
    message: str = "Server is running"
    services: Dict[str, bool]


class ErrorOut(BaseModel):
    error: str
    details: Optional[str] = None
    invalidRecipients: Optional[List[str]] = None
