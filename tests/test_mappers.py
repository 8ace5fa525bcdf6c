"""
测试数据映射器
"""
from datetime import datetime

import pytest

from tree_manager.core.tree import Tree
from tree_manager.core.node import SimpleNode, ButtonNode
from tree_manager.data.mapper import TreeDataMapper, TreeNodeDataMapper
from tree_manager.exceptions import InvalidArgumentError, TypeMismatchError, UnknownNodeTypeError


class TestTreeDataMapper:
    """测试树映射器"""

    def test_row_to_entity(self, clock):
        mapper = TreeDataMapper(clock)
        tree = mapper.map_to_entity({
            'id': "3",
            'name': "Docs",
            'description': None,
            'created_at': "2024-02-01 10:00:00",
            'updated_at': "2024-02-02 11:30:00",
            'is_active': "0",
        })

        assert tree.id == 3
        assert tree.name == "Docs"
        assert tree.created_at == datetime(2024, 2, 1, 10, 0, 0)
        assert tree.updated_at == datetime(2024, 2, 2, 11, 30, 0)
        assert tree.is_active is False

    def test_entity_to_row(self, clock):
        row = TreeDataMapper().map_to_array(Tree(None, "Docs", "d", clock=clock))

        assert row == {
            'id': None,
            'name': "Docs",
            'description': "d",
            'created_at': "2024-01-01 00:00:00",
            'updated_at': "2024-01-01 00:00:00",
            'is_active': 1,
        }

    def test_invalid_input(self):
        """测试错误输入直接报错"""
        mapper = TreeDataMapper()
        with pytest.raises(TypeMismatchError):
            mapper.map_to_array(SimpleNode(1, "A", 1))
        with pytest.raises(InvalidArgumentError):
            mapper.map_to_entity({'id': 1, 'name': "x", 'created_at': "yesterday",
                                  'updated_at': "2024-01-01 00:00:00", 'is_active': 1})
        with pytest.raises(InvalidArgumentError):
            mapper.map_to_entity({'id': 1, 'name': "x"})

    def test_map_to_entities(self):
        rows = [
            {'id': i, 'name': f"t{i}", 'description': None, 'created_at': "2024-01-01 00:00:00",
             'updated_at': "2024-01-01 00:00:00", 'is_active': 1}
            for i in (1, 2)
        ]
        assert [t.id for t in TreeDataMapper().map_to_entities(rows)] == [1, 2]


class TestTreeNodeDataMapper:
    """测试节点映射器"""

    def test_button_row(self):
        node = TreeNodeDataMapper().map_to_entity({
            'id': 5,
            'tree_id': 1,
            'parent_id': 2,
            'name': "Start",
            'sort_order': 3,
            'type_class': "ButtonNode",
            'type_data': '{"button_text": "Go", "button_action": "nav()"}',
        })

        assert isinstance(node, ButtonNode)
        assert node.parent_id == 2
        assert node.sort_order == 3
        assert node.button_text == "Go"
        assert node.button_action == "nav()"

    @pytest.mark.parametrize("parent_id", [None, "", 0])
    def test_empty_parent_is_root(self, parent_id):
        node = TreeNodeDataMapper().map_to_entity({
            'id': 1, 'tree_id': 1, 'parent_id': parent_id, 'name': "r",
            'sort_order': 0, 'type_class': "SimpleNode", 'type_data': None,
        })
        assert node.is_root()
        assert isinstance(node, SimpleNode)

    def test_entity_to_row(self):
        node = ButtonNode(None, "开始", 1, parent_id=2, type_data={'button_text': "走"})
        row = TreeNodeDataMapper().map_to_array(node)

        assert row['id'] is None
        assert row['type_class'] == "ButtonNode"
        assert row['parent_id'] == 2
        assert row['type_data'] == '{"button_text": "走", "button_action": ""}'

    def test_invalid_rows(self):
        mapper = TreeNodeDataMapper()
        base = {'id': 1, 'tree_id': 1, 'parent_id': None, 'name': "r", 'sort_order': 0,
                'type_class': "SimpleNode", 'type_data': "{}"}

        with pytest.raises(UnknownNodeTypeError):
            mapper.map_to_entity(dict(base, type_class="FancyNode"))
        with pytest.raises(InvalidArgumentError):
            mapper.map_to_entity(dict(base, type_data="not json"))
        with pytest.raises(InvalidArgumentError):
            mapper.map_to_entity(dict(base, type_data="[1, 2]"))
        with pytest.raises(TypeMismatchError):
            mapper.map_to_array(Tree(1, "t"))
