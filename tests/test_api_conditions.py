import pytest


def condition_payload(pet_survey, **overrides):
    payload = {
        "survey_id": pet_survey["survey_id"],
        "source_question_id": pet_survey["owns_pet"],
        "target_question_id": pet_survey["age"],
        "condition_type": "hide_if",
        "condition_operator": "equals",
        "condition_value": "No",
    }
    payload.update(overrides)
    return payload


async def test_list_conditions(client, pet_survey):
    await client.post("/api/conditions", json=condition_payload(pet_survey))
    response = await client.get(f"/api/conditions/survey/{pet_survey['survey_id']}")
    assert response.status_code == 200
    conditions = response.json()
    assert len(conditions) == 2
    assert {c["target_question_id"] for c in conditions} == {pet_survey["kind"], pet_survey["age"]}


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"condition_type": "jump"}, "Valid condition type is required"),
        ({"condition_operator": "like"}, "Valid condition operator is required"),
        ({"condition_value": ""}, "Condition value is required"),
    ],
)
async def test_invalid_condition_rejected(client, pet_survey, overrides, message):
    response = await client.post("/api/conditions", json=condition_payload(pet_survey, **overrides))
    assert response.status_code == 400
    assert message in response.json()["detail"]


async def test_same_source_and_target_rejected(client, pet_survey):
    response = await client.post(
        "/api/conditions",
        json=condition_payload(pet_survey, target_question_id=pet_survey["owns_pet"]),
    )
    assert response.status_code == 400


async def test_question_from_other_survey_rejected(client, pet_survey):
    other = (await client.post("/api/surveys", json={"title": "Other"})).json()
    foreign = await client.post(
        "/api/questions",
        json={
            "survey_id": other["id"],
            "question_text": "Elsewhere",
            "question_type": "text",
            "order_index": 1,
        },
    )
    response = await client.post(
        "/api/conditions",
        json=condition_payload(pet_survey, target_question_id=foreign.json()["id"]),
    )
    assert response.status_code == 400
    assert "Target question must belong to the survey" in response.json()["detail"]


async def test_emptiness_operator_needs_no_value(client, pet_survey):
    response = await client.post(
        "/api/conditions",
        json=condition_payload(
            pet_survey,
            source_question_id=pet_survey["allergies"],
            condition_operator="is_not_empty",
            condition_value=None,
        ),
    )
    assert response.status_code == 201


async def test_cycle_rejected(client, pet_survey):
    # Existing: owns_pet -> kind. Adding kind -> owns_pet would close a loop.
    response = await client.post(
        "/api/conditions",
        json=condition_payload(
            pet_survey,
            source_question_id=pet_survey["kind"],
            target_question_id=pet_survey["owns_pet"],
            condition_type="show_if",
        ),
    )
    assert response.status_code == 409


async def test_delete_condition(client, pet_survey):
    response = await client.delete(f"/api/conditions/{pet_survey['condition_id']}")
    assert response.status_code == 200
    assert (await client.delete(f"/api/conditions/{pet_survey['condition_id']}")).status_code == 404

    preview = await client.post(
        f"/api/surveys/{pet_survey['survey_id']}/visible-questions", json={"answers": []}
    )
    assert pet_survey["kind"] in preview.json()["visible_question_ids"]
