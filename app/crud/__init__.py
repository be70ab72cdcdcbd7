from . import crud_condition, crud_question, crud_response, crud_survey  # noqa: F401
