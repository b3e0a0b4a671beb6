import json

from hypothesis import given
from hypothesis import strategies as st

from payload_listener import codec

json_scalars = (
    st.none()
    | st.booleans()
    | st.integers(min_value=-(2**200), max_value=2**200)
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text()
)
json_values = st.recursive(
    json_scalars,
    lambda children: st.lists(children, max_size=5)
    | st.dictionaries(st.text(), children, max_size=5),
    max_leaves=25,
)


@given(value=json_values)
def test_parsed_value_matches_serialized_document(value):
    assert codec.parse_strict(json.dumps(value)) == value


@given(number=st.integers(min_value=2**53, max_value=2**256))
def test_rendered_integers_keep_every_digit(number):
    text = json.dumps({"id": number, "neg": -number})
    rendered = codec.render(codec.parse_strict(text))
    assert str(number) in rendered
    assert f"-{number}" in rendered
