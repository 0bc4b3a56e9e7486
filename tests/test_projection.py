from vidtube.query.projection import Projection, expand, flatten, lookup, project


def test_lookup_follows_dotted_paths():
    record = {"video": {"owner": {"username": "ada"}}}
    assert lookup(record, "video.owner.username") == "ada"
    assert lookup(record, "video.title") is None
    assert lookup({"video": None}, "video.title") is None


def test_flatten_keeps_only_listed_fields():
    record = {"_id": "c1", "content": "hi", "secret": 1, "owner": {"username": "ada"}}
    assert flatten(record, {"_id": "_id", "author": "owner.username"}) == {"_id": "c1", "author": "ada"}


def test_expand_list_single_and_absent():
    assert expand({"a": 1, "items": [1, 2]}, "items") == [{"a": 1, "items": 1}, {"a": 1, "items": 2}]
    assert expand({"items": {"x": 1}}, "items") == [{"items": {"x": 1}}]
    assert expand({"items": None}, "items") == []
    assert expand({"items": []}, "items") == []
    assert expand({}, "items") == []


def test_project_with_unwind():
    records = [
        {"_id": "p1", "name": "mix", "vids": [{"title": "A"}, {"title": "B"}]},
        {"_id": "p2", "name": "empty", "vids": []},
    ]
    rows = project(records, Projection(fields={"playlist": "_id", "title": "vids.title"}, unwind="vids"))
    assert rows == [{"playlist": "p1", "title": "A"}, {"playlist": "p1", "title": "B"}]


def test_project_does_not_mutate_input():
    record = {"_id": "x", "owner": {"username": "ada"}}
    project([record], Projection(fields={"username": "owner.username"}))
    assert record == {"_id": "x", "owner": {"username": "ada"}}
