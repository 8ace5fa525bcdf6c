"""
测试树仓库、节点仓库和缓存装饰器
"""
from datetime import datetime

import pytest

from tree_manager.core.tree import Tree
from tree_manager.core.node import SimpleNode, ButtonNode
from tree_manager.data.cache import InMemoryCache
from tree_manager.data.repository import (
    TreeRepository, TreeNodeRepository, CachedTreeRepository,
    ACTIVE_TREES_KEY, DELETED_TREES_KEY, ALL_TREES_KEY, tree_key, tree_name_key
)


@pytest.fixture
def tree_repo(connection, clock):
    return TreeRepository(connection, clock=clock)


@pytest.fixture
def node_repo(connection, clock):
    return TreeNodeRepository(connection, clock=clock)


class TestTreeRepository:
    """测试树仓库"""

    def test_insert_assigns_id(self, tree_repo, clock):
        tree = Tree(None, "Docs", "说明", clock=clock)
        saved = tree_repo.save(tree)

        assert saved is tree
        assert tree.id is not None

        loaded = tree_repo.find_by_id(tree.id)
        assert loaded.name == "Docs"
        assert loaded.description == "说明"
        assert loaded.created_at == datetime(2024, 1, 1)
        assert loaded.is_active

    def test_update(self, tree_repo, clock):
        tree = tree_repo.save(Tree(None, "Docs", clock=clock))
        tree.set_name("Manual")
        tree_repo.save(tree)

        loaded = tree_repo.find_by_id(tree.id)
        assert loaded.name == "Manual"
        assert loaded.updated_at > loaded.created_at
        assert len(tree_repo.find_all()) == 1

    def test_finders(self, tree_repo, clock):
        b = tree_repo.save(Tree(None, "b", clock=clock))
        a = tree_repo.save(Tree(None, "a", clock=clock))
        c = tree_repo.save(Tree(None, "c", clock=clock))
        tree_repo.soft_delete(c.id)

        assert [t.name for t in tree_repo.find_all()] == ["a", "b", "c"]
        assert [t.id for t in tree_repo.find_active()] == [a.id, b.id]
        assert [t.id for t in tree_repo.find_deleted()] == [c.id]
        assert tree_repo.find_by_name("b").id == b.id
        assert tree_repo.find_by_name("zzz") is None
        assert tree_repo.find_by_id(999) is None

    def test_soft_delete_and_restore(self, tree_repo, clock):
        tree = tree_repo.save(Tree(None, "Docs", clock=clock))

        clock.advance(30)
        tree_repo.soft_delete(tree.id)
        loaded = tree_repo.find_by_id(tree.id)
        assert not loaded.is_active
        assert loaded.updated_at == datetime(2024, 1, 1, 0, 0, 30)

        tree_repo.restore(tree.id)
        assert tree_repo.find_by_id(tree.id).is_active

    def test_find_tree_structure_is_metadata(self, tree_repo, clock):
        tree = tree_repo.save(Tree(None, "Docs", clock=clock))
        assert tree_repo.find_tree_structure(tree.id).name == "Docs"
        assert tree_repo.find_tree_structure(999) is None

    def test_delete_cascades(self, tree_repo, node_repo, clock):
        """测试物理删除树时一并删除节点"""
        tree = tree_repo.save(Tree(None, "Docs", clock=clock))
        other = tree_repo.save(Tree(None, "Other", clock=clock))
        node_repo.save(SimpleNode(None, "n", tree.id))
        node_repo.save(SimpleNode(None, "m", other.id))

        tree_repo.delete(tree.id)

        assert tree_repo.find_by_id(tree.id) is None
        assert node_repo.find_by_tree_id(tree.id) == []
        assert len(node_repo.find_by_tree_id(other.id)) == 1

    def test_delete_by_tree_id_keeps_tree(self, tree_repo, node_repo, clock):
        tree = tree_repo.save(Tree(None, "Docs", clock=clock))
        node_repo.save(SimpleNode(None, "n", tree.id))

        tree_repo.delete_by_tree_id(tree.id)

        assert tree_repo.find_by_id(tree.id) is not None
        assert node_repo.find_by_tree_id(tree.id) == []


class TestTreeNodeRepository:
    """测试节点仓库"""

    def build_tree(self, node_repo):
        root = node_repo.save(SimpleNode(None, "root", 1))
        b = node_repo.save(SimpleNode(None, "b", 1, parent_id=root.id, sort_order=2))
        a = node_repo.save(ButtonNode(None, "a", 1, parent_id=root.id, sort_order=1,
                                      type_data={'button_text': "Go", 'button_action': "nav()"}))
        c = node_repo.save(SimpleNode(None, "c", 1, parent_id=root.id, sort_order=3))
        return root, a, b, c

    def test_save_returns_node_with_id(self, node_repo):
        node = SimpleNode(None, "n", 1)
        saved = node_repo.save(node)

        assert node.id is None
        assert saved.id is not None
        assert node_repo.find_by_id(saved.id) == saved

    def test_update(self, node_repo):
        saved = node_repo.save(SimpleNode(None, "n", 1))
        moved = node_repo.save(saved.with_parent(42))

        assert moved.id == saved.id
        assert node_repo.find_by_id(saved.id).parent_id == 42

    def test_type_data_round_trip(self, node_repo):
        root, a, b, c = self.build_tree(node_repo)
        loaded = node_repo.find_by_id(a.id)

        assert isinstance(loaded, ButtonNode)
        assert loaded.button_text == "Go"
        assert loaded.button_action == "nav()"

    def test_finders(self, node_repo):
        root, a, b, c = self.build_tree(node_repo)
        node_repo.save(SimpleNode(None, "elsewhere", 2))

        assert [n.id for n in node_repo.find_by_tree_id(1)] == [root.id, a.id, b.id, c.id]
        assert [n.id for n in node_repo.find_children(root.id)] == [a.id, b.id, c.id]
        assert [n.id for n in node_repo.find_root_nodes(1)] == [root.id]
        assert node_repo.find_by_id(999) is None

    def test_find_tree_structure(self, node_repo):
        root, a, b, c = self.build_tree(node_repo)
        node_repo.save(SimpleNode(None, "orphan", 1, parent_id=999))

        roots = node_repo.find_tree_structure(1)

        assert [n.id for n in roots] == [root.id]
        assert [n.name for n in roots[0].get_children()] == ["a", "b", "c"]
        assert node_repo.find_tree_structure(5) == []

    def test_siblings(self, node_repo):
        """测试前后兄弟节点查询"""
        root, a, b, c = self.build_tree(node_repo)

        assert node_repo.find_previous_sibling(b.id).id == a.id
        assert node_repo.find_next_sibling(b.id).id == c.id
        assert node_repo.find_previous_sibling(a.id) is None
        assert node_repo.find_next_sibling(c.id) is None
        assert node_repo.find_previous_sibling(root.id) is None
        assert node_repo.find_next_sibling(999) is None

    def test_root_siblings(self, node_repo):
        """测试根节点之间的兄弟关系"""
        first = node_repo.save(SimpleNode(None, "first", 1, sort_order=0))
        second = node_repo.save(SimpleNode(None, "second", 1, sort_order=0))

        assert node_repo.find_next_sibling(first.id).id == second.id
        assert node_repo.find_previous_sibling(second.id).id == first.id

    def test_delete(self, node_repo):
        root, a, b, c = self.build_tree(node_repo)
        node_repo.delete(b.id)
        assert node_repo.find_by_id(b.id) is None

        node_repo.delete_by_tree_id(1)
        assert node_repo.find_by_tree_id(1) == []


class CountingTreeRepository(TreeRepository):
    """统计底层查询次数"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.loads = 0

    def find_by_id(self, tree_id):
        self.loads += 1
        return super().find_by_id(tree_id)

    def find_active(self):
        self.loads += 1
        return super().find_active()


class TestCachedTreeRepository:
    """测试缓存装饰器"""

    @pytest.fixture
    def cache(self, clock):
        return InMemoryCache(clock)

    @pytest.fixture
    def inner(self, connection, clock):
        return CountingTreeRepository(connection, clock=clock)

    @pytest.fixture
    def repo(self, inner, cache):
        return CachedTreeRepository(inner, cache)

    def test_read_through(self, repo, inner, cache, clock):
        tree = repo.save(Tree(None, "Docs", clock=clock))

        repo.find_by_id(tree.id)
        repo.find_by_id(tree.id)

        assert inner.loads == 1
        assert cache.has(tree_key(tree.id))

    def test_miss_not_cached(self, repo, inner, cache):
        assert repo.find_by_id(999) is None
        assert repo.find_by_id(999) is None
        assert inner.loads == 2
        assert not cache.has(tree_key(999))

    def test_returned_trees_do_not_alias_cache(self, repo, inner, clock):
        """测试修改读到的 Tree 而不保存时，缓存内容不变"""
        tree = repo.save(Tree(None, "Docs", clock=clock))

        repo.find_by_id(tree.id).soft_delete()
        repo.find_by_id(tree.id).soft_delete()
        repo.find_active()[0].set_name("Changed")

        assert inner.loads == 2
        assert repo.find_by_id(tree.id).is_active
        assert [t.name for t in repo.find_active()] == ["Docs"]
        assert repo.find_by_id(tree.id) is not repo.find_by_id(tree.id)

    def test_save_invalidates(self, repo, clock):
        """测试保存后读取不到旧数据"""
        tree = repo.save(Tree(None, "Docs", clock=clock))
        assert repo.find_by_id(tree.id).name == "Docs"
        assert [t.name for t in repo.find_active()] == ["Docs"]
        assert repo.find_by_name("Docs").id == tree.id

        renamed = Tree(tree.id, "Manual", clock=clock)
        repo.save(renamed)

        assert repo.find_by_id(tree.id).name == "Manual"
        assert [t.name for t in repo.find_active()] == ["Manual"]
        assert repo.find_by_name("Docs") is None

    def test_soft_delete_invalidates_lists(self, repo, clock):
        tree = repo.save(Tree(None, "Docs", clock=clock))
        assert len(repo.find_active()) == 1
        assert repo.find_deleted() == []

        repo.soft_delete(tree.id)
        assert repo.find_active() == []
        assert [t.id for t in repo.find_deleted()] == [tree.id]
        assert not repo.find_by_id(tree.id).is_active

        repo.restore(tree.id)
        assert [t.id for t in repo.find_active()] == [tree.id]

    def test_delete_invalidates(self, repo, cache, clock):
        tree = repo.save(Tree(None, "Docs", clock=clock))
        repo.find_by_id(tree.id)
        repo.find_all()
        repo.find_tree_structure(tree.id)

        repo.delete(tree.id)

        for key in (tree_key(tree.id), ALL_TREES_KEY, ACTIVE_TREES_KEY, DELETED_TREES_KEY):
            assert not cache.has(key)
        assert repo.find_by_id(tree.id) is None
        assert repo.find_all() == []

    def test_ttl_expiry(self, repo, inner, clock):
        """测试缓存过期后重新加载"""
        repo.save(Tree(None, "Docs", clock=clock))
        repo.find_active()
        clock.advance(3600)
        repo.find_active()
        assert inner.loads == 1

        clock.advance(1)
        repo.find_active()
        assert inner.loads == 2

    def test_name_key_is_hashed(self):
        key = tree_name_key("Docs")
        assert key.startswith("tree_name:")
        assert "Docs" not in key
        assert key == tree_name_key("Docs")
