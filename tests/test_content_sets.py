from __future__ import annotations

from apprentice_api.domain.entities.expiry import ExpiryPolicy
from apprentice_api.domain.entities.product import ContentSetDefinition, Course
from apprentice_api.domain.services.content_sets import build_product_course_mappings, extract_course_ids


CONTENT_SET = (
    'a:3:{'
    'i:0;a:3:{s:12:"content_type";s:4:"term";s:7:"content";s:11:"tva_courses";'
    's:5:"value";a:2:{i:0;i:11;i:1;s:2:"12";}}'
    'i:1;a:3:{s:12:"content_type";s:4:"post";s:7:"content";s:10:"tva_lesson";'
    's:5:"value";a:1:{i:0;i:99;}}'
    'i:2;a:3:{s:12:"content_type";s:4:"term";s:7:"content";s:11:"tva_courses";'
    's:5:"value";a:2:{i:0;i:12;i:1;i:13;}}'
    '}'
)


def test_extract_keeps_course_terms_and_dedups():
    assert extract_course_ids(CONTENT_SET) == [11, 12, 13]


def test_extract_handles_missing_or_broken_content():
    assert extract_course_ids(None) == []
    assert extract_course_ids("") == []
    assert extract_course_ids("plain post body") == []
    assert extract_course_ids('a:1:{i:0;a:1:{') == []


def test_extract_ignores_rules_without_array_value():
    rules = [{"content_type": "term", "content": "tva_courses", "value": "11"}]

    assert extract_course_ids(rules) == []


def test_build_mappings_merges_content_sets_and_keeps_unresolved_products():
    definitions = [
        ContentSetDefinition(post_id=70, product_id=7, product_name="Bundle", post_content=None),
        ContentSetDefinition(post_id=71, product_id=7, product_name="Bundle", post_content=None),
        ContentSetDefinition(post_id=80, product_id=8, product_name="Broken", post_content=None),
        ContentSetDefinition(post_id=90, product_id=9, product_name="Lessons only", post_content=None),
    ]
    policy = ExpiryPolicy.unlimited()

    mappings = build_product_course_mappings(
        definitions=definitions,
        course_ids_by_post={70: [11, 12], 71: [12, 13, 404], 80: [404], 90: []},
        course_names={11: "Intro", 12: "Advanced", 13: "Expert"},
        policies_by_product={7: policy},
    )

    assert [mapping.product_id for mapping in mappings] == [7, 8]
    assert mappings[0].courses == [
        Course(course_id=11, course_name="Intro"),
        Course(course_id=12, course_name="Advanced"),
        Course(course_id=13, course_name="Expert"),
    ]
    assert mappings[0].expiry is policy
    assert mappings[1].product_name == "Broken"
    assert mappings[1].courses == []
    assert mappings[1].expiry.mode == "not_configured"
