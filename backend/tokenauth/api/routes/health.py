from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "version": request.app.version,
    }


@router.get("/health/metrics")
async def get_metrics(request: Request):
    """Get current auth metrics."""
    return await request.app.state.metrics.get_all()
