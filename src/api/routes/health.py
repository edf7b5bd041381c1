from fastapi import APIRouter, Response, status

router = APIRouter(tags=["health"])


@router.get("/ping")
async def ping():
    """Health check endpoint, no auth required"""
    return Response(status_code=status.HTTP_200_OK)
