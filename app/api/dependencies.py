"""Shared FastAPI dependencies"""
from fastapi import Request

from execution.core import Dispatcher


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher
