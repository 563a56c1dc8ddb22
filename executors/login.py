from fastapi import HTTPException

from executors.base import BaseExecutor
from models.gateway import LoginRequest, LoginResponse
from services.billing_client import BillingClient


class LoginExecutor(BaseExecutor):
    """
    Forwards credentials to the billing API's auth endpoint.
    Downstream failures keep their status code and error text.
    """

    def __init__(self, billing: BillingClient):
        self.billing = billing

    async def execute(self, request: LoginRequest) -> dict:
        result = await self.billing.login(request.username, request.password)

        if not result.ok:
            raise HTTPException(status_code=result.status_code, detail=result.error)

        return LoginResponse(token=result.token).model_dump()
