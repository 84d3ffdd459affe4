"""
Task input readers.

This module loads a complete solution task from disk:
- XML format (``<task>`` documents with model, solution and input-data sections)
- YAML format (``task``, ``geometry`` and ``boundary_conditions`` mappings)

Example XML document:
    <task>
      <model name="A5">
        <model-parameters lambda="100" mu="100"/>
      </model>
      <solution task-type="CARTESIAN3D" modified-newton="yes"
                load-increments-count="10" desired-tolerance="1e-8">
        <element-type name="TETRAHEDRA10" nodes-count="10" gauss-nodes-count="4"/>
        <line-search max="5"/>
        <arc-length max="0"/>
      </solution>
      <input-data>
        <geometry>
          <nodes count="10">
            <node id="0" x="0" y="0" z="0"/>
            ...
          </nodes>
          <elements count="1">
            <element id="0" node1="0" node2="1" ... node10="9"/>
          </elements>
        </geometry>
        <boundary-conditions>
          <prescribed-displacements count="1">
            <presc-node id="0" node-id="0" x="0" y="0" z="0" type="7"/>
          </prescribed-displacements>
        </boundary-conditions>
      </input-data>
    </task>
"""

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Union

import numpy as np
import yaml

from fem_solid.core.bc import BoundaryConditions, PrescribedNode
from fem_solid.core.config import MaterialModel, SolutionSizing, TaskConfig
from fem_solid.core.geometry import Geometry
from fem_solid.elements import ElementFactory

logger = logging.getLogger(__name__)

_NODE_ATTRIBUTE = re.compile(r"^node(\d+)$")


class InputError(ValueError):
    """Malformed input file content."""


class InputData(NamedTuple):
    task: TaskConfig
    sizing: SolutionSizing
    geometry: Geometry
    boundary: BoundaryConditions


def load_input(filepath: Union[str, Path]) -> InputData:
    """
    Load a solution task from disk.

    The format is chosen by file suffix: ``.xml`` or ``.yaml``/``.yml``.

    Parameters
    ----------
    filepath : str or Path
        Path to the input file.

    Returns
    -------
    InputData
        Validated task, sizing, geometry and boundary conditions.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    InputError
        If the content is malformed or the format is unknown.
    ConfigurationError
        If the task configuration is unsupported or inconsistent.
    IndexError
        If an element or prescribed node references a missing node.
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {filepath}")

    ext = path.suffix.lower()
    if ext == ".xml":
        task, geometry, boundary, nodes_per_element = _read_xml(path)
    elif ext in (".yaml", ".yml"):
        task, geometry, boundary, nodes_per_element = _read_yaml(path)
    else:
        raise InputError(f"Unknown input format '{ext}'. Use '.xml', '.yaml' or '.yml'.")

    data = _finalize(task, geometry, boundary, nodes_per_element)
    logger.info(
        "Loaded %s: %d nodes, %d elements, %d prescribed nodes",
        path.name,
        geometry.node_count,
        geometry.element_count,
        len(boundary),
    )
    return data


def _finalize(
    task: TaskConfig,
    geometry: Geometry,
    boundary: BoundaryConditions,
    nodes_per_element: Optional[int],
) -> InputData:
    element = ElementFactory.get_element(task.element_kind)
    sizing = SolutionSizing.create(task, element, geometry.node_count, nodes_per_element)
    geometry.validate(sizing.nodes_per_element)
    boundary.validate(geometry.node_count)
    return InputData(task, sizing, geometry, boundary)


# =============================================================================
# XML format
# =============================================================================


def _normalize(element: ET.Element) -> None:
    """Lower-case tag and attribute names and strip attribute values, in place."""
    element.tag = element.tag.strip().lower()
    element.attrib = {k.strip().lower(): v.strip() for k, v in element.attrib.items()}
    for child in element:
        _normalize(child)


def _number(element: ET.Element, name: str, kind: type = float, default: Any = None) -> Any:
    text = element.get(name)
    if text is None:
        if default is None:
            raise InputError(f"<{element.tag}> is missing attribute '{name}'")
        return default
    try:
        value = float(text)
    except ValueError:
        raise InputError(f"<{element.tag}> attribute '{name}' is not a number: {text!r}") from None
    if kind is int:
        if not value.is_integer():
            raise InputError(f"<{element.tag}> attribute '{name}' is not an integer: {text!r}")
        return int(value)
    return kind(value)


def _flag(text: Optional[str], default: bool) -> bool:
    if text is None:
        return default
    return text.lower() in ("yes", "true", "1")


def _indexed(items: List[ET.Element], what: str) -> Dict[int, ET.Element]:
    """Map the 0-based ``id`` of each item, rejecting duplicates."""
    by_id: Dict[int, ET.Element] = {}
    for item in items:
        idx = _number(item, "id", int)
        if idx < 0:
            raise InputError(f"Negative {what} id: {idx}")
        if idx in by_id:
            raise InputError(f"Duplicate {what} id: {idx}")
        by_id[idx] = item
    missing = sorted(set(range(len(by_id))) - set(by_id))
    if missing:
        raise InputError(f"Missing {what} ids: {missing[:10]}")
    return by_id


def _read_xml(path: Path):
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise InputError(f"Malformed XML in {path}: {e}") from None
    _normalize(root)
    if root.tag != "task":
        raise InputError(f"Root element must be <task>, got <{root.tag}>")

    model = root.find(".//model")
    model_data: Dict[str, Any] = {}
    if model is not None:
        model_data["type"] = model.get("name", "A5")
        params = model.find("model-parameters")
        if params is None:
            params = root.find(".//model-parameters")
        if params is not None:
            try:
                model_data["parameters"] = [float(v) for v in params.attrib.values()]
            except ValueError:
                raise InputError(f"Non-numeric model parameters: {params.attrib}") from None

    solution = root.find(".//solution")
    if solution is None:
        solution = ET.Element("solution")
    element_type = solution.find("element-type")
    if element_type is None:
        element_type = ET.Element("element-type")
    line_search = root.find(".//line-search")
    arc_length = root.find(".//arc-length")

    nodes_per_element = None
    if element_type.get("nodes-count") is not None:
        nodes_per_element = _number(element_type, "nodes-count", int)

    task = TaskConfig(
        element_kind=element_type.get("name", "TETRAHEDRA10"),
        model=MaterialModel.from_dict(model_data),
        gauss_points_count=_number(element_type, "gauss-nodes-count", int, 5),
        task_type=solution.get("task-type", "CARTESIAN3D"),
        load_increments_count=_number(solution, "load-increments-count", int, 0),
        desired_tolerance=_number(solution, "desired-tolerance", float, 1e-8),
        linesearch_max=0 if line_search is None else _number(line_search, "max", int, 0),
        arclength_max=0 if arc_length is None else _number(arc_length, "max", int, 0),
        modified_newton=_flag(solution.get("modified-newton"), True),
    )

    geometry_tag = root.find("input-data/geometry")
    if geometry_tag is None:
        raise InputError("Missing <input-data>/<geometry> section")

    nodes = _indexed(geometry_tag.findall("nodes/node"), "node")
    coords = np.array(
        [[_number(nodes[i], axis) for axis in ("x", "y", "z")] for i in range(len(nodes))]
    ).reshape(-1, 3)

    elements = _indexed(geometry_tag.findall("elements/element"), "element")
    width = nodes_per_element
    connectivity = []
    for i in range(len(elements)):
        slots = {}
        for name, value in elements[i].attrib.items():
            match = _NODE_ATTRIBUTE.match(name)
            if match:
                slots[int(match.group(1)) - 1] = _number(elements[i], name, int)
        if width is None:
            width = max(slots) + 1 if slots else 0
        missing = [k + 1 for k in range(width) if k not in slots]
        if missing:
            raise InputError(f"Element {i} is missing node attributes {missing}")
        extra = sorted(k + 1 for k in slots if not 0 <= k < width)
        if extra:
            raise InputError(f"Element {i} has node attributes {extra} beyond width {width}")
        connectivity.append([slots[k] for k in range(width)])

    presc = _indexed(
        root.findall("input-data/boundary-conditions/prescribed-displacements/presc-node"),
        "presc-node",
    )
    prescribed = []
    for i in range(len(presc)):
        try:
            prescribed.append(
                PrescribedNode(
                    node=_number(presc[i], "node-id", int),
                    values=tuple(_number(presc[i], axis, float, 0.0) for axis in ("x", "y", "z")),
                    type=presc[i].get("type", "7"),
                )
            )
        except ValueError as e:
            if isinstance(e, InputError):
                raise
            raise InputError(f"presc-node {i}: {e}") from None

    geometry = Geometry(nodes=coords, elements=np.array(connectivity, dtype=np.int64))
    return task, geometry, BoundaryConditions(tuple(prescribed)), nodes_per_element


# =============================================================================
# YAML format
# =============================================================================


def _read_yaml(path: Path):
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InputError(f"Malformed YAML in {path}: {e}") from None
    if not isinstance(data, dict):
        raise InputError(f"Top level of {path} must be a mapping")

    task_data = data.get("task", {}) or {}
    task = TaskConfig.from_dict(task_data)
    nodes_per_element = task_data.get("nodes_per_element")
    if nodes_per_element is not None:
        nodes_per_element = int(nodes_per_element)

    geometry_data = data.get("geometry")
    if not isinstance(geometry_data, dict):
        raise InputError("Missing 'geometry' section")
    try:
        coords = np.array(geometry_data.get("nodes", []), dtype=np.float64)
        connectivity = np.array(geometry_data.get("elements", []), dtype=np.int64)
    except (TypeError, ValueError) as e:
        raise InputError(f"Malformed geometry: {e}") from None
    if coords.size and (coords.ndim != 2 or coords.shape[1] != 3):
        raise InputError(f"Nodes must be a list of [x, y, z], got shape {coords.shape}")
    if connectivity.size and connectivity.ndim != 2:
        raise InputError("Elements must be a list of equal-length node index lists")

    bc_data = data.get("boundary_conditions", {}) or {}
    prescribed = []
    for i, entry in enumerate(bc_data.get("prescribed", []) or []):
        try:
            prescribed.append(
                PrescribedNode(
                    node=int(entry["node"]),
                    values=tuple(entry.get("values", (0.0, 0.0, 0.0))),
                    type=entry.get("type", 7),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InputError(f"Prescribed entry {i}: {e}") from None

    geometry = Geometry(nodes=coords, elements=connectivity)
    return task, geometry, BoundaryConditions(tuple(prescribed)), nodes_per_element
