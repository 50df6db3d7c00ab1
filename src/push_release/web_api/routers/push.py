"""
Push Router
===========
Webhook endpoints called by the release pipeline.

Bodies are form-encoded.  Every field is optional at the HTTP layer so that
missing values reach the secret gate and validators instead of failing with
FastAPI's 422.  Handlers are plain ``def``: the pipeline blocks on network
I/O and runs in the threadpool.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import PlainTextResponse

from push_release.api import Orchestrators
from push_release.web_api.dependencies import get_orchestrators

router = APIRouter()


@router.post("/push-release/{tag}/{commit}", response_class=PlainTextResponse)
def push_release(
    tag: str,
    commit: str,
    secret: Optional[str] = Form(default=None),
    orchestrators: Orchestrators = Depends(get_orchestrators),
):
    """
    Register a release of *commit* in the operations contract.

    - **tag**: ``nightly`` or ``vX.Y.Z``
    - **commit**: 40-character commit hash
    - **secret** (form): shared secret
    """
    summary = orchestrators.release.push_release(tag=tag, commit=commit, secret=secret)
    return PlainTextResponse(summary)


@router.post("/push-build/{tag}/{platform}", response_class=PlainTextResponse)
def push_build(
    tag: str,
    platform: str,
    secret: Optional[str] = Form(default=None),
    commit: Optional[str] = Form(default=None),
    filename: Optional[str] = Form(default=None),
    sha3: Optional[str] = Form(default=None),
    orchestrators: Orchestrators = Depends(get_orchestrators),
):
    """
    Register a platform build: asset URL hint plus checksum.

    - **tag**: ``nightly`` or ``vX.Y.Z``
    - **platform**: supported target triple
    - **secret**, **commit**, **filename**, **sha3** (form)
    """
    summary = orchestrators.build.push_build(
        tag=tag,
        platform=platform,
        secret=secret,
        commit=commit,
        filename=filename,
        sha3=sha3,
    )
    return PlainTextResponse(summary)
