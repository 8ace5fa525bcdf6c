"""
文本树渲染器
以缩进文本的形式展示组装好的树结构
"""
from typing import List

from ...interfaces import ITreeNodeVisitor
from .entity import TreeNode, SimpleNode, ButtonNode


class TextTreeRenderer(ITreeNodeVisitor):
    """
    文本渲染器

    每个节点一行，层级用 ├── / └── 连接符表示，例如：

        文档
        ├── 安装
        └── 开始 [Go] -> nav()
    """

    def __init__(self, show_ids: bool = False):
        self.show_ids = show_ids

    def visit_simple_node(self, node: SimpleNode) -> str:
        return self._label(node)

    def visit_button_node(self, node: ButtonNode) -> str:
        label = f"{self._label(node)} [{node.button_text}]"
        if node.button_action:
            label += f" -> {node.button_action}"
        return label

    def _label(self, node: TreeNode) -> str:
        if self.show_ids:
            return f"{node.name} (#{node.id})"
        return node.name

    def render(self, root_nodes: List[TreeNode]) -> str:
        """渲染根节点列表，根节点顶格，子节点带连接符"""
        lines = []
        for root in root_nodes:
            lines.append(root.accept(self))
            self._render_children(root, "", lines)
        return "\n".join(lines)

    def _render_children(self, node: TreeNode, prefix: str, lines: List[str]) -> None:
        children = node.get_children()
        for i, child in enumerate(children):
            is_last = (i == len(children) - 1)
            connector = "└── " if is_last else "├── "
            lines.append(f"{prefix}{connector}{child.accept(self)}")

            extension = "    " if is_last else "│   "
            self._render_children(child, prefix + extension, lines)
