from typing import Any

from heliclockter import datetime_utc

from clubhub.database import database
from clubhub.models.db.point_system import (
    ConditionalRule,
    ConditionalRuleBody,
    ConditionalRuleUpdateBody,
    FullPointSystemTemplate,
    PointSystemTemplateBody,
    PointSystemTemplateSummary,
    PointSystemTemplateUpdateBody,
    StagePoint,
    StagePointBody,
)
from clubhub.schema import conditional_rules, point_system_templates
from clubhub.utils.id_types import ConditionalRuleId, PointSystemTemplateId
from clubhub.utils.pagination import Pagination
from clubhub.utils.types import assert_some


def _search_filter(search: str | None) -> tuple[str, dict[str, Any]]:
    if not search:
        return "TRUE", {}
    return "pst.name ILIKE :search", {"search": f"%{search}%"}


async def get_point_system_templates(
    search: str | None, pagination: Pagination
) -> list[PointSystemTemplateSummary]:
    where, params = _search_filter(search)
    query = f"""
        SELECT
            pst.*,
            (SELECT count(*) FROM conditional_rules cr WHERE cr.template_id = pst.id) AS rule_count,
            (SELECT count(*) FROM stage_points sp WHERE sp.template_id = pst.id) AS stage_count,
            (
                SELECT count(*)
                FROM tournaments t
                WHERE t.point_system_template_id = pst.id
            ) AS tournament_count
        FROM point_system_templates pst
        WHERE {where}
        ORDER BY pst.created DESC, pst.id DESC
        LIMIT :limit
        OFFSET :offset
        """
    result = await database.fetch_all(
        query=query,
        values={**params, "limit": pagination.limit, "offset": pagination.offset},
    )
    return [PointSystemTemplateSummary.model_validate(dict(x._mapping)) for x in result]


async def get_point_system_template_count(search: str | None) -> int:
    where, params = _search_filter(search)
    query = f"SELECT count(*) FROM point_system_templates pst WHERE {where}"
    return int(await database.fetch_val(query=query, values=params))


async def get_stage_points(template_id: PointSystemTemplateId) -> list[StagePoint]:
    query = """
        SELECT *
        FROM stage_points
        WHERE template_id = :template_id
        ORDER BY stage_order ASC, id ASC
        """
    result = await database.fetch_all(query=query, values={"template_id": template_id})
    return [StagePoint.model_validate(dict(x._mapping)) for x in result]


async def get_conditional_rules(template_id: PointSystemTemplateId) -> list[ConditionalRule]:
    query = """
        SELECT *
        FROM conditional_rules
        WHERE template_id = :template_id
        ORDER BY id ASC
        """
    result = await database.fetch_all(query=query, values={"template_id": template_id})
    return [ConditionalRule.model_validate(dict(x._mapping)) for x in result]


async def get_conditional_rule(
    template_id: PointSystemTemplateId, rule_id: ConditionalRuleId
) -> ConditionalRule | None:
    query = """
        SELECT *
        FROM conditional_rules
        WHERE id = :rule_id
        AND template_id = :template_id
        """
    result = await database.fetch_one(
        query=query, values={"rule_id": rule_id, "template_id": template_id}
    )
    return ConditionalRule.model_validate(dict(result._mapping)) if result is not None else None


async def get_point_system_template(
    template_id: PointSystemTemplateId,
) -> FullPointSystemTemplate | None:
    result = await database.fetch_one(
        "SELECT * FROM point_system_templates WHERE id = :template_id",
        values={"template_id": template_id},
    )
    if result is None:
        return None

    return FullPointSystemTemplate.model_validate(
        {
            **dict(result._mapping),
            "stage_points": await get_stage_points(template_id),
            "conditional_rules": await get_conditional_rules(template_id),
        }
    )


async def get_tournament_names_using_template(template_id: PointSystemTemplateId) -> list[str]:
    query = """
        SELECT name
        FROM tournaments
        WHERE point_system_template_id = :template_id
        ORDER BY name ASC
        """
    result = await database.fetch_all(query=query, values={"template_id": template_id})
    return [str(x._mapping["name"]) for x in result]


async def _insert_stage_points(
    template_id: PointSystemTemplateId, stage_points: list[StagePointBody]
) -> None:
    for stage in stage_points:
        await database.execute(
            """
            INSERT INTO stage_points (
                template_id,
                stage_name,
                stage_order,
                points_per_win,
                points_per_draw,
                points_per_loss,
                points_per_goal_scored,
                points_per_goal_conceded
            )
            VALUES (
                :template_id,
                :stage_name,
                :stage_order,
                :points_per_win,
                :points_per_draw,
                :points_per_loss,
                :points_per_goal_scored,
                :points_per_goal_conceded
            )
            """,
            values={"template_id": template_id, **stage.model_dump()},
        )


async def sql_create_conditional_rule(
    template_id: PointSystemTemplateId, rule: ConditionalRuleBody
) -> ConditionalRule:
    new_id = await database.execute(
        query=conditional_rules.insert(),
        values={**rule.model_dump(), "template_id": template_id, "created": datetime_utc.now()},
    )
    return assert_some(await get_conditional_rule(template_id, ConditionalRuleId(new_id)))


async def sql_create_point_system_template(
    body: PointSystemTemplateBody,
) -> FullPointSystemTemplate:
    now = datetime_utc.now()

    async with database.transaction():
        new_id = await database.execute(
            query=point_system_templates.insert(),
            values={
                **body.model_dump(exclude={"stage_points", "conditional_rules"}),
                "created": now,
                "updated": now,
            },
        )
        template_id = PointSystemTemplateId(new_id)
        await _insert_stage_points(template_id, body.stage_points)
        for rule in body.conditional_rules:
            await sql_create_conditional_rule(template_id, rule)

    return assert_some(await get_point_system_template(template_id))


async def sql_update_point_system_template(
    template_id: PointSystemTemplateId, body: PointSystemTemplateUpdateBody
) -> FullPointSystemTemplate:
    values = body.model_dump(exclude_unset=True, exclude={"stage_points"})

    async with database.transaction():
        await database.execute(
            query=point_system_templates.update().where(point_system_templates.c.id == template_id),
            values={**values, "updated": datetime_utc.now()},
        )
        if body.stage_points is not None:
            await database.execute(
                "DELETE FROM stage_points WHERE template_id = :template_id",
                values={"template_id": template_id},
            )
            await _insert_stage_points(template_id, body.stage_points)

    return assert_some(await get_point_system_template(template_id))


async def sql_delete_point_system_template(template_id: PointSystemTemplateId) -> None:
    query = "DELETE FROM point_system_templates WHERE id = :template_id"
    await database.execute(query=query, values={"template_id": template_id})


async def sql_update_conditional_rule(
    rule: ConditionalRule, body: ConditionalRuleUpdateBody
) -> ConditionalRule:
    values = body.model_dump(exclude_unset=True)
    if values:
        await database.execute(
            query=conditional_rules.update().where(conditional_rules.c.id == rule.id),
            values=values,
        )
    return assert_some(await get_conditional_rule(rule.template_id, rule.id))


async def sql_delete_conditional_rule(rule_id: ConditionalRuleId) -> None:
    query = "DELETE FROM conditional_rules WHERE id = :rule_id"
    await database.execute(query=query, values={"rule_id": rule_id})


async def get_template_id_by_name(name: str) -> PointSystemTemplateId | None:
    query = "SELECT id FROM point_system_templates WHERE lower(name) = lower(:name)"
    result = await database.fetch_val(query=query, values={"name": name})
    return PointSystemTemplateId(result) if result is not None else None
