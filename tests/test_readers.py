"""Test suite for XML and YAML task input readers."""

from pathlib import Path

import numpy as np
import pytest

from fem_solid.cli.run_solver import TEMPLATE_CONFIG
from fem_solid.core.bc import PrescribedBoundaryType
from fem_solid.core.config import ConfigurationError, ElementKind
from fem_solid.core.io import InputError, load_input
from fem_solid.core.material import ModelType

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


# =============================================================================
# Test Fixtures
# =============================================================================

NODES_XML = """
        <node id="0" x="0.0" y="0.0" z="0.0"/>
        <node id="1" x="1.0" y="0.0" z="0.0"/>
        <node id="2" x="0.0" y="1.0" z="0.0"/>
        <node id="3" x="0.0" y="0.0" z="1.0"/>
        <node id="4" x="0.5" y="0.0" z="0.0"/>
        <node id="5" x="0.5" y="0.5" z="0.0"/>
        <node id="6" x="0.0" y="0.5" z="0.0"/>
        <node id="7" x="0.0" y="0.0" z="0.5"/>
        <node id="8" x="0.5" y="0.0" z="0.5"/>
        <node id="9" x="0.0" y="0.5" z="0.5"/>
"""

ELEMENT_XML = (
    '<element id="0" node1="0" node2="1" node3="2" node4="3" node5="4" '
    'node6="5" node7="6" node8="7" node9="8" node10="9"/>'
)


def task_xml(
    model='<model name="A5"><model-parameters lambda="80" mu="40"/></model>',
    element_type='<element-type name="TETRAHEDRA10" nodes-count="10" gauss-nodes-count="5"/>',
    nodes=NODES_XML,
    elements=ELEMENT_XML,
    prescribed='<presc-node id="0" node-id="0" x="0" y="0" z="0" type="7"/>',
):
    return f"""<?xml version="1.0"?>
<task>
  {model}
  <solution task-type="CARTESIAN3D" modified-newton="no"
            load-increments-count="12" desired-tolerance="1e-6">
    {element_type}
    <line-search max="4"/>
    <arc-length max="2"/>
  </solution>
  <input-data>
    <geometry>
      <nodes>{nodes}</nodes>
      <elements>{elements}</elements>
    </geometry>
    <boundary-conditions>
      <prescribed-displacements>{prescribed}</prescribed-displacements>
    </boundary-conditions>
  </input-data>
</task>
"""


@pytest.fixture
def write(tmp_path):
    def _write(text, name="task.xml"):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


# =============================================================================
# XML format
# =============================================================================


class TestXmlReader:
    def test_load(self, write):
        data = load_input(write(task_xml()))
        task = data.task
        assert task.element_kind == ElementKind.TETRAHEDRA10
        assert task.model.model == ModelType.A5
        assert task.model.parameters == (80.0, 40.0)
        assert task.gauss_points_count == 5
        assert task.modified_newton is False
        assert task.load_increments_count == 12
        assert task.desired_tolerance == 1e-6
        assert task.linesearch_max == 4
        assert task.arclength_max == 2

        assert data.geometry.node_count == 10
        assert np.allclose(data.geometry.nodes[8], [0.5, 0.0, 0.5])
        assert np.array_equal(data.geometry.elements[0], np.arange(10))
        assert data.sizing.msize == 30

        (presc,) = data.boundary.prescribed
        assert presc.node == 0
        assert presc.type == PrescribedBoundaryType.XYZ

    def test_example_file(self):
        data = load_input(EXAMPLES_DIR / "unit_tetra.xml")
        assert data.task.gauss_points_count == 4
        assert len(data.boundary) == 3
        assert data.boundary.fixed_dofs(3) == {
            0: 0.0, 1: 0.0, 2: 0.0, 4: 0.0, 5: 0.0, 8: 0.0
        }

    def test_case_insensitive(self, write):
        text = task_xml().replace("<task>", "<TASK>").replace("</task>", "</TASK>")
        text = text.replace("<nodes>", "<Nodes>").replace("</nodes>", "</Nodes>")
        text = text.replace("gauss-nodes-count", "Gauss-Nodes-Count")
        data = load_input(write(text))
        assert data.geometry.node_count == 10
        assert data.task.gauss_points_count == 5

    def test_node_attributes_in_any_order(self, write):
        element = (
            '<element node10="9" node9="8" node8="7" node7="6" node6="5" node5="4" '
            'node4="3" node3="2" node2="1" node1="0" id="0"/>'
        )
        data = load_input(write(task_xml(elements=element)))
        assert np.array_equal(data.geometry.elements[0], np.arange(10))

    def test_defaults_without_solution_attributes(self, write):
        data = load_input(write(task_xml(element_type='<element-type name="TETRAHEDRA10"/>')))
        assert data.task.gauss_points_count == 5

    def test_unknown_model(self, write):
        with pytest.raises(ConfigurationError):
            load_input(write(task_xml(model='<model name="B7"/>')))

    def test_nodes_count_mismatch(self, write):
        element_type = '<element-type name="TETRAHEDRA10" nodes-count="4" gauss-nodes-count="5"/>'
        element = '<element id="0" node1="0" node2="1" node3="2" node4="3"/>'
        with pytest.raises(ConfigurationError):
            load_input(write(task_xml(element_type=element_type, elements=element)))

    def test_node_attributes_beyond_width(self, write):
        element_type = '<element-type name="TETRAHEDRA10" nodes-count="4" gauss-nodes-count="5"/>'
        with pytest.raises(InputError, match="beyond width"):
            load_input(write(task_xml(element_type=element_type)))

    def test_extra_node_attribute(self, write):
        with pytest.raises(InputError, match=r"\[11\]"):
            load_input(write(task_xml(elements=ELEMENT_XML.replace("/>", ' node11="0"/>'))))

    @pytest.mark.parametrize("attribute", ['node-id="1.7"', 'node-id="nan"'])
    def test_non_integral_index(self, write, attribute):
        prescribed = f'<presc-node id="0" {attribute} x="0" y="0" z="0" type="7"/>'
        with pytest.raises(InputError):
            load_input(write(task_xml(prescribed=prescribed)))

    def test_non_integral_id(self, write):
        nodes = NODES_XML.replace('<node id="9"', '<node id="8.5"')
        with pytest.raises(InputError, match="not an integer"):
            load_input(write(task_xml(nodes=nodes)))

    def test_integral_float_text_accepted(self, write):
        elements = ELEMENT_XML.replace('node10="9"', 'node10="9.0"')
        data = load_input(write(task_xml(elements=elements)))
        assert data.geometry.elements[0, 9] == 9

    def test_unsupported_gauss_count(self, write):
        element_type = '<element-type name="TETRAHEDRA10" gauss-nodes-count="7"/>'
        with pytest.raises(ConfigurationError):
            load_input(write(task_xml(element_type=element_type)))

    def test_element_references_missing_node(self, write):
        with pytest.raises(IndexError):
            load_input(write(task_xml(elements=ELEMENT_XML.replace('node10="9"', 'node10="10"'))))

    def test_prescribed_node_out_of_range(self, write):
        prescribed = '<presc-node id="0" node-id="99" x="0" y="0" z="0" type="7"/>'
        with pytest.raises(IndexError):
            load_input(write(task_xml(prescribed=prescribed)))

    def test_missing_node_attribute(self, write):
        with pytest.raises(InputError):
            load_input(write(task_xml(elements=ELEMENT_XML.replace('node5="4" ', ""))))

    def test_missing_coordinate(self, write):
        nodes = NODES_XML.replace('y="0.0" z="1.0"', 'y="0.0"')
        with pytest.raises(InputError):
            load_input(write(task_xml(nodes=nodes)))

    def test_duplicate_node_id(self, write):
        nodes = NODES_XML.replace('<node id="9"', '<node id="8"')
        with pytest.raises(InputError):
            load_input(write(task_xml(nodes=nodes)))

    def test_non_numeric_attribute(self, write):
        nodes = NODES_XML.replace('x="1.0"', 'x="one"')
        with pytest.raises(InputError):
            load_input(write(task_xml(nodes=nodes)))

    def test_malformed_xml(self, write):
        with pytest.raises(InputError):
            load_input(write("<task><model></task>"))

    def test_wrong_root(self, write):
        with pytest.raises(InputError):
            load_input(write("<problem/>"))


# =============================================================================
# YAML format
# =============================================================================


class TestYamlReader:
    def test_template(self, write):
        data = load_input(write(TEMPLATE_CONFIG, "task.yaml"))
        assert data.task.gauss_points_count == 4
        assert data.task.linesearch_max == 5
        assert data.geometry.element_count == 1
        assert data.boundary.prescribed[1].type == PrescribedBoundaryType.YZ

    def test_engineering_constants(self, write):
        text = TEMPLATE_CONFIG.replace(
            "parameters: [100.0, 100.0]  # lambda, mu", "E: 1.0\n    nu: 0.25"
        )
        data = load_input(write(text, "task.yml"))
        assert data.task.model.lam == pytest.approx(0.4)

    def test_missing_geometry(self, write):
        with pytest.raises(InputError):
            load_input(write("task:\n  dof: 3\n", "task.yaml"))

    def test_malformed_yaml(self, write):
        with pytest.raises(InputError):
            load_input(write("task: [unclosed\n", "task.yaml"))

    def test_ragged_elements(self, write):
        text = "geometry:\n  nodes: [[0, 0, 0]]\n  elements: [[0, 0], [0]]\n"
        with pytest.raises(InputError):
            load_input(write(text, "task.yaml"))

    def test_bad_prescribed_entry(self, write):
        text = TEMPLATE_CONFIG.replace('type: "yz"', 'type: "uvw"')
        with pytest.raises(InputError):
            load_input(write(text, "task.yaml"))


# =============================================================================
# File handling
# =============================================================================


class TestLoadInput:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_input(tmp_path / "missing.xml")

    def test_unknown_suffix(self, write):
        with pytest.raises(InputError):
            load_input(write("{}", "task.json"))

    def test_input_error_is_value_error(self):
        assert issubclass(InputError, ValueError)
