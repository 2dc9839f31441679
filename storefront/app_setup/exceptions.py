"""
Gestionnaires d’exceptions.
- StorefrontError (InvalidRequest, SignatureInvalid, UpstreamError): {"error": message} + code de l’erreur.
- HTTPException (ex: 429 du rate limiting): même format {"error": detail}.
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from storefront.payments.errors import StorefrontError

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content={"error": f"{exc.prefix}{exc.message}"})

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)
