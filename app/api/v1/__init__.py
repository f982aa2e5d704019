"""v1 API 라우터 패키지 — 모든 엔드포인트 통합.

v1 API Router package — Aggregates every endpoint into a single router
for inclusion in the FastAPI application under ``/api/v1``.

Included routers:
    - members: 가입, 인증, 토큰, 멤버 관리 (Sign-up, validation, tokens, member admin)
    - branches: 지점 관리 (Branch management)
    - menus: 메뉴 관리 (Menu management)
    - files: 파일 업로드 (File uploads)
"""

from fastapi import APIRouter

from app.api.v1.branches import router as branches_router
from app.api.v1.files import router as files_router
from app.api.v1.members import router as members_router
from app.api.v1.menus import router as menus_router

api_router: APIRouter = APIRouter()

api_router.include_router(members_router, prefix="/members", tags=["Members"])
api_router.include_router(branches_router, prefix="/branches", tags=["Branches"])
api_router.include_router(menus_router, prefix="/menus", tags=["Menus"])
api_router.include_router(files_router, prefix="/files", tags=["Files"])
