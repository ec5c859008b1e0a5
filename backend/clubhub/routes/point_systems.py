from fastapi import APIRouter, Depends
from pydantic import ValidationError as PydanticValidationError

from clubhub.config import config
from clubhub.models.db.admin import AdminPublic
from clubhub.models.db.point_system import (
    ConditionalRule,
    ConditionalRuleBody,
    ConditionalRuleUpdateBody,
    FullPointSystemTemplate,
    PointSystemTemplateBody,
    PointSystemTemplateUpdateBody,
)
from clubhub.routes.auth import admin_authenticated
from clubhub.routes.models import (
    ConditionalRulesResponse,
    PageInfo,
    PaginatedPointSystems,
    PointSystemsResponse,
    SingleConditionalRuleResponse,
    SinglePointSystemResponse,
    SuccessResponse,
)
from clubhub.routes.util import conditional_rule_dependency, point_system_dependency
from clubhub.sql.point_systems import (
    get_point_system_template_count,
    get_point_system_templates,
    get_template_id_by_name,
    get_tournament_names_using_template,
    sql_create_conditional_rule,
    sql_create_point_system_template,
    sql_delete_conditional_rule,
    sql_delete_point_system_template,
    sql_update_conditional_rule,
    sql_update_point_system_template,
)
from clubhub.utils.errors import (
    ConflictError,
    ForeignKey,
    ValidationError,
    check_foreign_key_violation,
)
from clubhub.utils.id_types import PointSystemTemplateId
from clubhub.utils.pagination import Pagination

router = APIRouter(prefix=config.api_prefix)


async def check_name_available(
    name: str, template_id: PointSystemTemplateId | None = None
) -> None:
    existing_id = await get_template_id_by_name(name)
    if existing_id is not None and existing_id != template_id:
        raise ConflictError("A point system template with this name already exists")


@router.get("/point-systems", response_model=PointSystemsResponse)
async def list_point_systems(
    search: str | None = None,
    pagination: Pagination = Depends(),
    _: AdminPublic = Depends(admin_authenticated),
) -> PointSystemsResponse:
    total = await get_point_system_template_count(search)
    return PointSystemsResponse(
        data=PaginatedPointSystems(
            templates=await get_point_system_templates(search, pagination),
            pagination=PageInfo.build(pagination.page, pagination.page_size, total),
        )
    )


@router.post("/point-systems", response_model=SinglePointSystemResponse, status_code=201)
async def create_point_system(
    template_body: PointSystemTemplateBody, _: AdminPublic = Depends(admin_authenticated)
) -> SinglePointSystemResponse:
    await check_name_available(template_body.name)
    return SinglePointSystemResponse(data=await sql_create_point_system_template(template_body))


@router.get("/point-systems/{template_id}", response_model=SinglePointSystemResponse)
async def get_point_system(
    _: AdminPublic = Depends(admin_authenticated),
    template: FullPointSystemTemplate = Depends(point_system_dependency),
) -> SinglePointSystemResponse:
    return SinglePointSystemResponse(data=template)


@router.put("/point-systems/{template_id}", response_model=SinglePointSystemResponse)
async def update_point_system(
    template_body: PointSystemTemplateUpdateBody,
    _: AdminPublic = Depends(admin_authenticated),
    template: FullPointSystemTemplate = Depends(point_system_dependency),
) -> SinglePointSystemResponse:
    if template_body.name is not None:
        await check_name_available(template_body.name, template.id)

    with check_foreign_key_violation({ForeignKey.matches_stage_id_fkey}):
        updated = await sql_update_point_system_template(template.id, template_body)

    return SinglePointSystemResponse(data=updated)


@router.delete("/point-systems/{template_id}", response_model=SuccessResponse)
async def delete_point_system(
    _: AdminPublic = Depends(admin_authenticated),
    template: FullPointSystemTemplate = Depends(point_system_dependency),
) -> SuccessResponse:
    tournament_names = await get_tournament_names_using_template(template.id)
    if len(tournament_names) > 0:
        raise ConflictError(
            f"Cannot delete template: currently assigned to {len(tournament_names)} "
            f"tournament(s). Affected tournaments: {', '.join(tournament_names)}"
        )

    with check_foreign_key_violation(
        {ForeignKey.tournaments_point_system_template_id_fkey, ForeignKey.matches_stage_id_fkey}
    ):
        await sql_delete_point_system_template(template.id)

    return SuccessResponse()


@router.get("/point-systems/{template_id}/rules", response_model=ConditionalRulesResponse)
async def list_conditional_rules(
    _: AdminPublic = Depends(admin_authenticated),
    template: FullPointSystemTemplate = Depends(point_system_dependency),
) -> ConditionalRulesResponse:
    return ConditionalRulesResponse(data=template.conditional_rules)


@router.post(
    "/point-systems/{template_id}/rules",
    response_model=SingleConditionalRuleResponse,
    status_code=201,
)
async def create_conditional_rule(
    rule_body: ConditionalRuleBody,
    _: AdminPublic = Depends(admin_authenticated),
    template: FullPointSystemTemplate = Depends(point_system_dependency),
) -> SingleConditionalRuleResponse:
    return SingleConditionalRuleResponse(
        data=await sql_create_conditional_rule(template.id, rule_body)
    )


@router.put(
    "/point-systems/{template_id}/rules/{rule_id}", response_model=SingleConditionalRuleResponse
)
async def update_conditional_rule(
    rule_body: ConditionalRuleUpdateBody,
    _: AdminPublic = Depends(admin_authenticated),
    rule: ConditionalRule = Depends(conditional_rule_dependency),
) -> SingleConditionalRuleResponse:
    try:
        ConditionalRuleBody.model_validate(
            {**rule.model_dump(), **rule_body.model_dump(exclude_unset=True)}
        )
    except PydanticValidationError as exc:
        messages = [str(error["msg"]) for error in exc.errors()]
        raise ValidationError("Validation failed", details={"rule": messages}) from exc

    return SingleConditionalRuleResponse(data=await sql_update_conditional_rule(rule, rule_body))


@router.delete("/point-systems/{template_id}/rules/{rule_id}", response_model=SuccessResponse)
async def delete_conditional_rule(
    _: AdminPublic = Depends(admin_authenticated),
    rule: ConditionalRule = Depends(conditional_rule_dependency),
) -> SuccessResponse:
    await sql_delete_conditional_rule(rule.id)
    return SuccessResponse()
