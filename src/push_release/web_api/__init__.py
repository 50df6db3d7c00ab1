"""
Push Release Web API
====================
FastAPI surface for CI webhooks:

    POST /push-release/{tag}/{commit}
    POST /push-build/{tag}/{platform}
"""
