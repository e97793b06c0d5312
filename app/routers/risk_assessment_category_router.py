from fastapi import APIRouter, Request, status

from app.middleware.auth_middleware import get_actor
from app.schemas.risk_assessment_category_schema import CategoryCreateRequest, CategoryUpdateRequest
from app.services.risk_assessments.category_service import (
    create_category,
    delete_category,
    get_categories,
    get_category_by_id,
    update_category,
)
from app.utils.messages import messages
from app.utils.responses import api_response

router = APIRouter(prefix="/risk-assessment-categories", tags=["Risk Assessment Category APIs"])


@router.get("")
async def get_all():
    return api_response(status.HTTP_200_OK, messages["categories_fetched"], await get_categories())


@router.get("/{category_id}")
async def get_one(category_id: int):
    return api_response(status.HTTP_200_OK, messages["category_fetched"], await get_category_by_id(category_id))


@router.post("")
async def create(payload: CategoryCreateRequest, request: Request):
    result = await create_category(payload, get_actor(request))
    return api_response(status.HTTP_201_CREATED, messages["category_created"], result)


@router.put("/{category_id}")
async def update(category_id: int, payload: CategoryUpdateRequest, request: Request):
    result = await update_category(category_id, payload, get_actor(request))
    return api_response(status.HTTP_200_OK, messages["category_updated"], result)


@router.delete("/{category_id}")
async def delete(category_id: int):
    await delete_category(category_id)
    return api_response(status.HTTP_200_OK, messages["category_deleted"], {"category_id": category_id})
