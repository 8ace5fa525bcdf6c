"""
树管理系统基本使用示例
"""
import sys
import os

# 添加src到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tree_manager import TreeSystem
from tree_manager.core.node import TextTreeRenderer


def main():
    """主函数"""
    print("=" * 60)
    print("树管理系统 - 基本使用示例")
    print("=" * 60)

    # 1. 创建系统实例
    print("\n1. 初始化系统...")
    with TreeSystem({"system_name": "文档导航", "log_level": "WARNING"}) as system:
        service = system.tree_service
        renderer = TextTreeRenderer(show_ids=True)

        # 2. 创建树
        print("\n2. 创建文档树...")
        tree = service.create_tree_with_nodes("文档", "产品文档导航", [
            {"name": "入门"},
            {"name": "进阶", "sort_order": 1},
            {"name": "开始使用", "type": "ButtonNode",
             "type_data": {"button_text": "开始", "button_action": "open('/start')"}},
        ])
        print(f"   树创建成功: {tree.name} (#{tree.id})")
        print(renderer.render(service.get_tree_structure(tree.id)))

        # 3. 调整结构
        print("\n3. 移动按钮到“入门”下，并把“进阶”左移...")
        intro, button, advanced = system.node_repository.find_root_nodes(tree.id)
        service.move_node(button.id, intro.id)
        service.sort_node_left(advanced.id)
        print(renderer.render(service.get_tree_structure(tree.id)))

        # 4. 软删除与恢复
        print("\n4. 软删除与恢复...")
        service.soft_delete_tree(tree.id)
        print(f"   已删除的树: {[t.name for t in service.list_deleted_trees()]}")
        service.restore_tree(tree.id)
        print(f"   有效的树: {[t.name for t in service.list_active_trees()]}")

    print("\n" + "=" * 60)
    print("示例完成")
    print("=" * 60)


if __name__ == "__main__":
    main()
