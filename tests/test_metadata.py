"""Tests for vaultview/markdown/extensions/metadata.py"""
from pandoc_json import doc, header, para

from vaultview.markdown.config import RenderOptions
from vaultview.markdown.extensions import (
    assign_heading_ids,
    collect_metadata,
    nest_headings,
    resolve_obsidian_links,
    transform_tags,
)
from vaultview.markdown.models import HeadingRecord, LinkRecord, RenderState
from vaultview.markdown.tree import from_pandoc


def _processed_tree():
    tree = from_pandoc(doc(
        header(1, "Trip"),
        para("Read [[Plans/夏之北海道|the plan]] #travel and #food #travel"),
        header(2, "Days"),
        header(3, "Day 1"),
        header(2, "Days"),
    ))
    state = RenderState(current_file_path="/Trips/Visited-Places.md")
    resolve_obsidian_links(tree, state, RenderOptions())
    transform_tags(tree)
    assign_heading_ids(tree)
    return tree


def test_collect_metadata():
    metadata = collect_metadata(_processed_tree())

    assert metadata.headings == [
        HeadingRecord(1, "Trip", "trip"),
        HeadingRecord(2, "Days", "days"),
        HeadingRecord(3, "Day 1", "day-1"),
        HeadingRecord(2, "Days", "days-1"),
    ]
    assert metadata.links[0] == LinkRecord("#/Trips/Plans/夏之北海道", "the plan")
    assert LinkRecord("#tag:travel", "#travel") in metadata.links
    assert metadata.tags == ["travel", "food"]


def test_metadata_as_dict():
    data = collect_metadata(_processed_tree()).as_dict()
    assert data["headings"][0] == {"level": 1, "text": "Trip", "id": "trip"}
    assert data["links"][0] == {"target": "#/Trips/Plans/夏之北海道", "text": "the plan"}
    assert data["tags"] == ["travel", "food"]


def test_nest_headings():
    toc = nest_headings([
        HeadingRecord(1, "Trip", "trip"),
        HeadingRecord(2, "Days", "days"),
        HeadingRecord(3, "Day 1", "day-1"),
        HeadingRecord(2, "Costs", "costs"),
    ])

    (root,) = toc
    assert root["id"] == "trip"
    assert [child["id"] for child in root["children"]] == ["days", "costs"]
    assert root["children"][0]["children"][0]["title"] == "Day 1"


def test_toc_from_metadata():
    metadata = collect_metadata(_processed_tree())
    toc = metadata.toc()
    assert [entry["id"] for entry in toc[0]["children"]] == ["days", "days-1"]
