import logging

import pytest
import numpy as np
from io import StringIO

from mesh_io.gmsh import read_gmsh_mesh
from simplex_mesh.exceptions import InvalidArgumentError, MeshParseError


@pytest.fixture
def msh_square():
    """
    MSH 2.2 ASCII file: a boundary line in physical 1 ("edge"), one triangle
    in physical 2 ("surface") and one in physical 3 (unnamed).
    """
    return "\n".join(
        [
            "$MeshFormat",
            "2.2 0 8",
            "$EndMeshFormat",
            "$PhysicalNames",
            "2",
            '1 1 "edge"',
            '2 2 "surface"',
            "$EndPhysicalNames",
            "$Nodes",
            "4",
            "1 0 0 0",
            "2 1 0 0",
            "3 1 1 0",
            "4 0 1 0",
            "$EndNodes",
            "$Elements",
            "3",
            "1 1 2 1 1 1 2",
            "2 2 2 2 1 1 2 3",
            "3 2 2 3 1 1 3 4",
            "$EndElements",
            "",
        ]
    )


def test_read_all_triangles(msh_square):
    mesh = read_gmsh_mesh(StringIO(msh_square))

    assert mesh.numvertices == 4
    assert mesh.dimension == 2
    assert mesh.cells.tolist() == [[0, 1, 2], [0, 2, 3]]
    assert np.allclose(mesh.vertices[3], [0.0, 1.0, 0.0])


def test_read_physical_entity(msh_square):
    mesh = read_gmsh_mesh(StringIO(msh_square), physical="surface")
    assert mesh.cells.tolist() == [[0, 1, 2]]
    # All nodes are kept.
    assert mesh.numvertices == 4


def test_physical_entity_without_triangles(msh_square):
    mesh = read_gmsh_mesh(StringIO(msh_square), physical="edge")
    assert mesh.numcells == 0
    assert mesh.cells.shape == (0, 3)


def test_unknown_physical_entity(msh_square):
    with pytest.raises(MeshParseError):
        read_gmsh_mesh(StringIO(msh_square), physical="volume")


def test_physical_names_missing(msh_square):
    start = msh_square.index("$PhysicalNames")
    end = msh_square.index("$Nodes")
    text = msh_square[:start] + msh_square[end:]
    with pytest.raises(MeshParseError):
        read_gmsh_mesh(StringIO(text), physical="surface")
    # Without a filter the file is fine.
    assert read_gmsh_mesh(StringIO(text)).numcells == 2


def test_physical_must_be_a_name(msh_square):
    with pytest.raises(InvalidArgumentError):
        read_gmsh_mesh(StringIO(msh_square), physical=2)


def test_element_count_mismatch(msh_square):
    text = msh_square.replace("$Elements\n3\n", "$Elements\n4\n")
    with pytest.raises(MeshParseError):
        read_gmsh_mesh(StringIO(text))


def test_truncated_file(msh_square):
    text = msh_square.split("$Elements")[0]
    with pytest.raises(MeshParseError, match="unexpected end of file"):
        read_gmsh_mesh(StringIO(text))


def test_unknown_node(msh_square):
    text = msh_square.replace("3 2 2 3 1 1 3 4", "3 2 2 3 1 1 3 9")
    with pytest.raises(MeshParseError):
        read_gmsh_mesh(StringIO(text))


def test_read_from_path(tmp_path, msh_square):
    path = tmp_path / "square.msh"
    path.write_text(msh_square)
    assert read_gmsh_mesh(path, physical="surface").numcells == 1


def test_more_node_lines_than_declared(msh_square):
    text = msh_square.replace("$Nodes\n4\n", "$Nodes\n3\n")
    with pytest.raises(MeshParseError, match="expected 3 nodes"):
        read_gmsh_mesh(StringIO(text))


def test_fewer_node_lines_than_declared(msh_square):
    text = msh_square.replace("$Nodes\n4\n", "$Nodes\n5\n")
    with pytest.raises(MeshParseError):
        read_gmsh_mesh(StringIO(text))


def test_parse_failures_are_logged(msh_square, caplog):
    text = msh_square.split("$Elements")[0]
    with caplog.at_level(logging.ERROR, logger="mesh_io.gmsh"):
        with pytest.raises(MeshParseError):
            read_gmsh_mesh(StringIO(text))
    assert "unexpected end of file" in caplog.text

    caplog.clear()
    text = msh_square.replace("$Nodes\n4\n", "$Nodes\nfour\n")
    with caplog.at_level(logging.ERROR, logger="mesh_io.gmsh"):
        with pytest.raises(MeshParseError):
            read_gmsh_mesh(StringIO(text))
    assert "expected a count" in caplog.text
