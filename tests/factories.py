from types import SimpleNamespace


def make_question(question_id, order_index=None, question_type="text"):
    return SimpleNamespace(
        id=question_id,
        order_index=question_id if order_index is None else order_index,
        question_type=question_type,
    )


def make_answer(question_id, answer_value=None, answer_text=None, selected_options=None):
    return SimpleNamespace(
        question_id=question_id,
        answer_value=answer_value,
        answer_text=answer_text,
        selected_options=selected_options,
    )


def make_condition(
    source_question_id,
    target_question_id,
    condition_type="show_if",
    condition_operator="equals",
    condition_value=None,
    condition_id=None,
):
    return SimpleNamespace(
        id=condition_id,
        survey_id=1,
        source_question_id=source_question_id,
        target_question_id=target_question_id,
        condition_type=condition_type,
        condition_operator=condition_operator,
        condition_value=condition_value,
    )
