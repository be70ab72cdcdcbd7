import pytest


async def start(client, survey_id, **extra):
    response = await client.post("/api/responses/start", json={"survey_id": survey_id, **extra})
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def test_start_response(client, pet_survey):
    response = await client.post(
        "/api/responses/start",
        json={"survey_id": pet_survey["survey_id"], "respondent_email": "a@example.com"},
        headers={"User-Agent": "pytest"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["is_complete"] is False
    assert body["respondent_email"] == "a@example.com"


async def test_inactive_survey_rejects_responses(client, pet_survey):
    await client.put(f"/api/surveys/{pet_survey['survey_id']}", json={"is_active": False})
    response = await client.post(
        "/api/responses/start", json={"survey_id": pet_survey["survey_id"]}
    )
    assert response.status_code == 400


async def test_single_response_per_email(client, pet_survey):
    survey_id = pet_survey["survey_id"]
    await start(client, survey_id, respondent_email="a@example.com")
    again = await client.post(
        "/api/responses/start",
        json={"survey_id": survey_id, "respondent_email": "a@example.com"},
    )
    assert again.status_code == 409

    await client.put(f"/api/surveys/{survey_id}", json={"allow_multiple_responses": True})
    await start(client, survey_id, respondent_email="a@example.com")


async def test_visibility_follows_answers(client, pet_survey):
    response_id = await start(client, pet_survey["survey_id"])
    owns_pet, kind = pet_survey["owns_pet"], pet_survey["kind"]
    answer_url = f"/api/responses/{response_id}/answers/{owns_pet}"

    initial = (await client.get(f"/api/responses/{response_id}/visible-questions")).json()
    assert kind not in initial["visible_question_ids"]
    assert initial["navigation"]["total"] == 3

    no = (await client.put(answer_url, json={"answer_value": "No"})).json()
    assert kind not in no["visible_question_ids"]

    yes = (await client.put(answer_url, json={"answer_value": "Yes"})).json()
    assert kind in yes["visible_question_ids"]
    assert yes["navigation"]["total"] == 4

    # Overwritten, not appended
    detail = (await client.get(f"/api/responses/{response_id}")).json()
    assert len(detail["answers"]) == 1
    assert detail["answers"][0]["answer_value"] == "Yes"
    assert detail["answers"][0]["question_text"] == "Do you own a pet?"

    cleared = (await client.delete(answer_url, params={"current_index": 3})).json()
    assert kind not in cleared["visible_question_ids"]
    assert cleared["navigation"]["index"] == 2


async def test_multi_select_answer(client, pet_survey):
    response_id = await start(client, pet_survey["survey_id"])
    await client.post(
        "/api/conditions",
        json={
            "survey_id": pet_survey["survey_id"],
            "source_question_id": pet_survey["allergies"],
            "target_question_id": pet_survey["age"],
            "condition_type": "show_if",
            "condition_operator": "is_empty",
        },
    )
    url = f"/api/responses/{response_id}/answers/{pet_survey['allergies']}"

    empty = (await client.put(url, json={"selected_options": []})).json()
    assert pet_survey["age"] in empty["visible_question_ids"]

    picked = (await client.put(url, json={"selected_options": ["Cats"]})).json()
    assert pet_survey["age"] not in picked["visible_question_ids"]


async def test_numeric_answer_is_stored_as_text(client, pet_survey):
    response_id = await start(client, pet_survey["survey_id"])
    await client.put(
        f"/api/responses/{response_id}/answers/{pet_survey['age']}", json={"answer_value": 42}
    )
    detail = (await client.get(f"/api/responses/{response_id}")).json()
    assert detail["answers"][0]["answer_value"] == "42"


async def test_answer_requires_data(client, pet_survey):
    response_id = await start(client, pet_survey["survey_id"])
    response = await client.put(
        f"/api/responses/{response_id}/answers/{pet_survey['kind']}", json={}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == ["Answer data is required"]


async def test_answer_for_foreign_question_rejected(client, pet_survey):
    response_id = await start(client, pet_survey["survey_id"])
    response = await client.put(
        f"/api/responses/{response_id}/answers/9999", json={"answer_text": "x"}
    )
    assert response.status_code == 400


async def test_submit_finalizes_once(client, pet_survey):
    survey_id = pet_survey["survey_id"]
    response_id = await start(client, survey_id)
    await client.put(
        f"/api/responses/{response_id}/answers/{pet_survey['owns_pet']}",
        json={"answer_value": "No"},
    )

    submitted = await client.post(
        f"/api/responses/{response_id}/submit",
        json={
            "answers": [
                {"question_id": pet_survey["owns_pet"], "answer_value": "Yes"},
                {"question_id": pet_survey["kind"], "answer_text": "Cat"},
            ]
        },
    )
    assert submitted.status_code == 200
    body = submitted.json()
    assert body["is_complete"] is True
    assert body["completed_at"] is not None

    detail = (await client.get(f"/api/responses/{response_id}")).json()
    assert [a["question_id"] for a in detail["answers"]] == [
        pet_survey["owns_pet"],
        pet_survey["kind"],
    ]
    assert detail["answers"][0]["answer_value"] == "Yes"

    again = await client.post(f"/api/responses/{response_id}/submit", json={"answers": []})
    assert again.status_code == 409
    locked = await client.put(
        f"/api/responses/{response_id}/answers/{pet_survey['age']}", json={"answer_value": 3}
    )
    assert locked.status_code == 409

    listing = (await client.get(f"/api/responses/survey/{survey_id}")).json()
    assert listing[0]["answer_count"] == 2


async def test_submit_rejects_invalid_answers(client, pet_survey):
    response_id = await start(client, pet_survey["survey_id"])
    response = await client.post(
        f"/api/responses/{response_id}/submit",
        json={"answers": [{"question_id": pet_survey["kind"]}]},
    )
    assert response.status_code == 400

    still_open = (await client.get(f"/api/responses/{response_id}")).json()
    assert still_open["is_complete"] is False


async def test_unknown_response(client):
    assert (await client.get("/api/responses/404")).status_code == 404
    assert (await client.get("/api/responses/404/visible-questions")).status_code == 404


async def add_condition(client, pet_survey, source, target, condition_type, operator, value=None):
    response = await client.post(
        "/api/conditions",
        json={
            "survey_id": pet_survey["survey_id"],
            "source_question_id": pet_survey[source],
            "target_question_id": pet_survey[target],
            "condition_type": condition_type,
            "condition_operator": operator,
            "condition_value": value,
        },
    )
    assert response.status_code == 201, response.text


@pytest.mark.parametrize(
    "answers",
    [
        {"age": {"answer_value": 0}},
        {"age": {"answer_value": 0.0}},
        {"age": {"answer_value": 2.5}, "owns_pet": {"answer_value": "Yes"}},
        {"owns_pet": {"answer_value": True}},
        {"age": {"answer_text": "  ", "selected_options": []}},
        {"allergies": {"selected_options": []}, "owns_pet": {"answer_value": "Yes"}},
        {"allergies": {"selected_options": ["Cats", "Pollen"]}, "owns_pet": {"answer_value": "yes"}},
    ],
)
async def test_preview_matches_stored_response(client, pet_survey, answers):
    await add_condition(client, pet_survey, "age", "allergies", "hide_if", "is_empty")
    await add_condition(client, pet_survey, "allergies", "kind", "hide_if", "contains", "cat")

    preview = await client.post(
        f"/api/surveys/{pet_survey['survey_id']}/visible-questions",
        json={
            "answers": [
                {"question_id": pet_survey[key], **answer} for key, answer in answers.items()
            ]
        },
    )
    assert preview.status_code == 200, preview.text

    response_id = await start(client, pet_survey["survey_id"])
    for key, answer in answers.items():
        saved = await client.put(
            f"/api/responses/{response_id}/answers/{pet_survey[key]}", json=answer
        )
        assert saved.status_code == 200, saved.text
    stored = await client.get(f"/api/responses/{response_id}/visible-questions")

    assert preview.json()["visible_question_ids"] == stored.json()["visible_question_ids"]


async def test_zero_answer_is_not_empty(client, pet_survey):
    await add_condition(client, pet_survey, "age", "allergies", "hide_if", "is_empty")
    response_id = await start(client, pet_survey["survey_id"])

    saved = await client.put(
        f"/api/responses/{response_id}/answers/{pet_survey['age']}", json={"answer_value": 0}
    )
    assert pet_survey["allergies"] in saved.json()["visible_question_ids"]

    preview = await client.post(
        f"/api/surveys/{pet_survey['survey_id']}/visible-questions",
        json={"answers": [{"question_id": pet_survey["age"], "answer_value": 0}]},
    )
    assert pet_survey["allergies"] in preview.json()["visible_question_ids"]
