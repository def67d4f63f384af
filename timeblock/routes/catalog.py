"""Purpose category and people catalog endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Body

from ..schemas import CatalogOut, Person, PersonCreate, PurposeCategory, PurposeCreate
from ..services.planner_service import PlannerService, get_planner
from ..errors import CatalogError

router = APIRouter(tags=["catalog"])


@router.get("/", response_model=CatalogOut)
async def get_catalog(planner: PlannerService = Depends(get_planner)):
    return CatalogOut(purpose_categories=planner.catalog.purposes, people=planner.catalog.people)

@router.post("/purposes", response_model=PurposeCategory)
async def add_purpose(
    purpose_in: PurposeCreate = Body(...),
    planner: PlannerService = Depends(get_planner),
):
    try:
        return planner.add_purpose(purpose_in)
    except CatalogError as e:
        raise HTTPException(status_code=422, detail=str(e))

@router.post("/people", response_model=Person)
async def add_person(
    person_in: PersonCreate = Body(...),
    planner: PlannerService = Depends(get_planner),
):
    try:
        return planner.add_person(person_in.name)
    except CatalogError as e:
        raise HTTPException(status_code=422, detail=str(e))
