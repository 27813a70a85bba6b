"""Unit tests for ResourceMapper."""

from node_monitor.core.config import NodeMapping
from node_monitor.mapping.resource_mapper import ResourceMapper


def test_find_exact_match(node_mappings: list[NodeMapping]) -> None:
    """Test a mapped node resolves to its VM."""
    mapper = ResourceMapper(node_mappings)

    mapping = mapper.find("w3")

    assert mapping is not None
    assert mapping.proxmox_node == "pve1"
    assert mapping.vmid == 103


def test_find_unmapped_returns_none(node_mappings: list[NodeMapping]) -> None:
    """Test an unmapped node yields None rather than an error."""
    mapper = ResourceMapper(node_mappings)

    assert mapper.find("w4") is None


def test_find_is_case_sensitive(node_mappings: list[NodeMapping]) -> None:
    """Test lookups do not ignore case."""
    mapper = ResourceMapper(node_mappings)

    assert mapper.find("W3") is None


def test_find_returns_first_match() -> None:
    """Test the first configured mapping wins."""
    mapper = ResourceMapper(
        [
            NodeMapping(kubernetes_node_name="w1", proxmox_node="pve1", vmid=101),
            NodeMapping(kubernetes_node_name="w1", proxmox_node="pve2", vmid=201),
        ]
    )

    assert mapper.find("w1").vmid == 101


def test_resource_info(node_mappings: list[NodeMapping]) -> None:
    """Test resource description for mapped and unmapped nodes."""
    mapper = ResourceMapper(node_mappings)

    assert mapper.resource_info("w5") == "Proxmox Node: pve2, VM ID: 105"
    assert mapper.resource_info("w4") == ""

