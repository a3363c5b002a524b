from fastapi import APIRouter
from fastapi.responses import JSONResponse
from utils.health_check import check_system_health, get_system_info

router = APIRouter(tags=["health"])

@router.get("/health")
async def health():
    report = await check_system_health()
    report["info"] = get_system_info()
    status_code = 200 if report["status"] == "healthy" else 503
    return JSONResponse(report, status_code=status_code)
