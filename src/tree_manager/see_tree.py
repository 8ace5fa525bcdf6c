"""
命令行查看已保存的树
"""
import os
import sys
import argparse
from typing import List, Optional

from .system import TreeSystem
from .core.node.renderer import TextTreeRenderer
from .exceptions import BaseError


def print_tree_list(system: TreeSystem, include_deleted: bool = False) -> None:
    """打印树列表"""
    trees = system.tree_service.list_active_trees()
    if include_deleted:
        trees = trees + system.tree_service.list_deleted_trees()

    if not trees:
        print("（没有树）")
        return

    for tree in trees:
        status = "" if tree.is_active else " [已删除]"
        print(f"#{tree.id}  {tree.name}{status}")


def print_tree(system: TreeSystem, tree_ref: str, show_ids: bool = False) -> None:
    """
    打印一棵树

    Args:
        system: 树管理系统
        tree_ref: 树ID或树名称
        show_ids: 是否显示节点ID
    """
    if tree_ref.isdigit():
        tree = system.tree_repository.find_by_id(int(tree_ref))
    else:
        tree = system.tree_repository.find_by_name(tree_ref)

    if tree is None:
        raise SystemExit(f"错误：树 '{tree_ref}' 不存在")

    print(f"树: {tree.name} (#{tree.id})")
    roots = system.tree_service.get_tree_structure(tree.id)
    output = TextTreeRenderer(show_ids=show_ids).render(roots)
    if output:
        print(output)


def main(argv: Optional[List[str]] = None) -> int:
    # 创建命令行参数解析器
    parser = argparse.ArgumentParser(description='显示数据库中保存的树结构')
    parser.add_argument('database', help='SQLite数据库文件路径')
    parser.add_argument('tree', nargs='?', help='树ID或名称（省略时列出所有树）')
    parser.add_argument('-i', '--ids', action='store_true', help='显示节点ID')
    parser.add_argument('-a', '--all', action='store_true', help='列表中包含已删除的树')

    args = parser.parse_args(argv)

    # 检查数据库是否存在
    if not os.path.exists(args.database):
        print(f"错误：数据库 '{args.database}' 不存在", file=sys.stderr)
        return 1

    config = {
        'database_path': os.path.abspath(args.database),
        'log_level': 'WARNING',
        'enable_cache': False,
    }
    try:
        with TreeSystem(config) as system:
            if args.tree is None:
                print_tree_list(system, include_deleted=args.all)
            else:
                print_tree(system, args.tree, show_ids=args.ids)
    except BaseError as e:
        print(f"错误：{e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
