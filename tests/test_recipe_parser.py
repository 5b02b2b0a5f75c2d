import json

import pytest

from app.schemas.recipe import coerce_recipe
from app.services.errors import MalformedResponseError
from app.services.recipe_parser import parse_recipe_json, strip_code_fence

_RECIPE = {
    "name": "Tomato Basil Pasta",
    "ingredients": ["200g spaghetti", "3 tomatoes"],
    "instructions": ["Boil pasta.", "Toss with tomatoes."],
}


def test_parse_recipe_json_direct() -> None:
    assert parse_recipe_json(json.dumps(_RECIPE)) == _RECIPE


@pytest.mark.parametrize(
    "wrapped",
    [
        f"```json\n{json.dumps(_RECIPE)}\n```",
        f"```\n{json.dumps(_RECIPE, indent=2)}\n```",
        f"  ```JSON {json.dumps(_RECIPE)}```  ",
    ],
)
def test_parse_recipe_json_strips_code_fences(wrapped: str) -> None:
    assert parse_recipe_json(wrapped) == _RECIPE


def test_parse_recipe_json_extracts_object_from_prose() -> None:
    text = f"Here is your recipe:\n{json.dumps(_RECIPE)}\nEnjoy your meal!"

    assert parse_recipe_json(text) == _RECIPE


def test_fenced_reply_produces_same_recipe_as_plain_reply() -> None:
    plain = coerce_recipe(parse_recipe_json(json.dumps(_RECIPE)))
    fenced = coerce_recipe(parse_recipe_json(f"```json\n{json.dumps(_RECIPE)}\n```"))

    assert fenced == plain


@pytest.mark.parametrize("text", ["", "not json", "[1, 2, 3]", "```json\n{broken\n```"])
def test_parse_recipe_json_raises_when_no_object_recovered(text: str) -> None:
    with pytest.raises(MalformedResponseError):
        parse_recipe_json(text)


def test_strip_code_fence_leaves_plain_text_alone() -> None:
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'


def test_parse_recipe_json_ignores_braces_in_trailing_prose() -> None:
    text = f"Here you go: {json.dumps(_RECIPE)} Swap in {{your favourite}} herbs."

    assert parse_recipe_json(text) == _RECIPE


def test_parse_recipe_json_skips_unbalanced_brace_before_object() -> None:
    text = f"Use {{less salt. {json.dumps(_RECIPE)}"

    assert parse_recipe_json(text) == _RECIPE


def test_non_finite_servings_in_reply_default_to_four() -> None:
    for literal in ("Infinity", "-Infinity", "NaN"):
        text = json.dumps(_RECIPE)[:-1] + f', "servings": {literal}}}'

        assert coerce_recipe(parse_recipe_json(text)).servings == 4
