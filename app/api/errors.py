"""Error responses shared by the coordinator and agent services"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from execution.models import ValidationError


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # malformed or missing request fields are a 400, not FastAPI's 422
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request body", "errors": errors},
    )


async def domain_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


def install_error_handlers(app: FastAPI):
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, domain_validation_handler)
