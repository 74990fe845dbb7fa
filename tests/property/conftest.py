"""Hypothesis strategies for property testing.

Provides reusable composite strategies for generating payload references
and application payloads.
"""

from hypothesis import strategies as st

from src.big_payload.shared.models import PayloadReference

_KEY_ALPHABET = st.characters(
    whitelist_categories=("Lu", "Ll", "Nd"), whitelist_characters="-_./!*'()"
)


@st.composite
def payload_reference(draw, with_location=None):
    """Generate a PayloadReference as producers create them.

    Args:
        draw: Hypothesis draw function
        with_location: Force a location (True), none (False) or either (None)

    Returns:
        PayloadReference with non-empty bucket and key
    """
    bucket = draw(
        st.text(
            min_size=3,
            max_size=63,
            alphabet=st.characters(
                whitelist_categories=("Ll", "Nd"), whitelist_characters="-."
            ),
        )
    )
    prefix = draw(st.sampled_from(["", "queue-big-payload/", "tenant/a/"]))
    payload_id = draw(st.uuids().map(str))
    key = prefix + payload_id + draw(st.sampled_from(["", ".json"]))
    if with_location is None:
        with_location = draw(st.booleans())
    location = f"https://{bucket}.s3.us-east-1.amazonaws.com/{key}" if with_location else None
    return PayloadReference(id=payload_id, bucket=bucket, key=key, location=location)


@st.composite
def object_key(draw):
    """Generate arbitrary non-empty S3 object keys."""
    return draw(st.text(min_size=1, max_size=200, alphabet=_KEY_ALPHABET))


def json_values(max_leaves: int = 20):
    """Generate JSON-compatible application payloads."""
    scalars = (
        st.none()
        | st.booleans()
        | st.integers(min_value=-(2**53), max_value=2**53)
        | st.floats(allow_nan=False, allow_infinity=False)
        | st.text(max_size=50)
    )
    return st.recursive(
        scalars,
        lambda children: st.lists(children, max_size=5)
        | st.dictionaries(st.text(max_size=10), children, max_size=5),
        max_leaves=max_leaves,
    )
