"""关键词规则兜底引擎。

answer() 是纯函数：输入转小写后按固定顺序匹配关键词组，
单词关键词按分词结果整词匹配，含空格的短语按子串匹配；
第一个命中的组直接返回，因此同一输入永远落在同一分支。
"""

import re
from typing import FrozenSet, Tuple

RULE_PROVIDER = "rules"
RULE_MODEL = "rule-based"

GREETING = (
    "Hi! I'm the NexaBuild assistant. Ask me about signing in, creating a project, "
    "drawing walls and rooms, the 3D view, placing furniture, saving your work, or fixing errors."
)

GENERIC_HELP = "\n".join([
    "I can help with the main parts of NexaBuild:",
    "1. Account: sign up or log in from the top-right menu.",
    "2. Projects: create a new project from the dashboard.",
    "3. Floor plan: draw walls, curves, rooms, outdoor areas and roads.",
    "4. 3D view: switch to 3D to walk around your design.",
    "5. Furniture: open the furniture panel and drag items into a room.",
    "6. Saving: your progress is saved to your project.",
    "Tell me which step you're on and I'll guide you.",
])

# 顺序即优先级，第一个命中的组生效
RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (
        ("login", "log in", "sign in", "signin", "signup", "sign up", "register", "password", "account"),
        "\n".join([
            "To get into your account:",
            "1. Click \"Sign up\" in the top-right corner if you're new, or \"Log in\" if you already have an account.",
            "2. Enter your email and a password of at least 8 characters.",
            "3. Submit the form; you'll land on your dashboard once you're signed in.",
            "4. If login fails, check the email spelling and that Caps Lock is off, then try again.",
        ]),
    ),
    (
        ("new project", "create project", "create a project", "start a project", "add a project", "my projects"),
        "\n".join([
            "To create a project:",
            "1. Log in and open your dashboard.",
            "2. Click \"New project\" and give it a name.",
            "3. Pick a starting template or an empty plot.",
            "4. Open the project to start drawing your floor plan.",
        ]),
    ),
    (
        ("floor plan", "floorplan", "wall", "walls", "room", "rooms", "curve", "outdoor", "road", "draw"),
        "\n".join([
            "To build your floor plan:",
            "1. Open your project and choose the Wall tool from the toolbar.",
            "2. Click to start a wall, click again to end it; double-click to finish a run of walls.",
            "3. Use the Curve tool for rounded walls and the Room tool to close an area into a room.",
            "4. Add outdoor areas and roads from the Outdoor tab.",
            "5. Press Esc to cancel the current tool, or Ctrl+Z to undo the last step.",
        ]),
    ),
    (
        ("3d", "three d", "camera", "orbit", "rotate", "zoom", "view"),
        "\n".join([
            "To use the 3D view:",
            "1. Click the \"3D\" toggle above the canvas.",
            "2. Drag with the left mouse button to orbit the camera.",
            "3. Scroll to zoom in and out; drag with the right button to pan.",
            "4. Switch back to \"2D\" to keep editing the floor plan.",
        ]),
    ),
    (
        ("furniture", "sofa", "bed", "table", "chair", "place item", "decor"),
        "\n".join([
            "To place furniture:",
            "1. Open the Furniture panel on the left.",
            "2. Pick a category and drag an item into a room.",
            "3. Use the rotate handle to turn it and drag to reposition it.",
            "4. Select an item and press Delete to remove it.",
        ]),
    ),
    (
        ("save", "saving", "saved", "progress", "autosave", "lost my work"),
        "\n".join([
            "To save your work:",
            "1. Make sure you're logged in; saving is tied to your account.",
            "2. Click \"Save\" in the toolbar, or press Ctrl+S.",
            "3. Your project state and progress are stored with the project.",
            "4. Reopen the project from the dashboard to continue where you left off.",
        ]),
    ),
    (
        ("error", "bug", "broken", "not working", "doesn't work", "crash", "failed", "problem", "issue"),
        "\n".join([
            "Let's troubleshoot:",
            "1. Refresh the page and try the action again.",
            "2. Check that you're still logged in; sessions can expire.",
            "3. Make sure your internet connection is stable.",
            "4. If it keeps happening, tell me the exact error message and what you clicked before it appeared.",
        ]),
    ),
)


def _tokenize(text: str) -> FrozenSet[str]:
    return frozenset(re.findall(r"[a-z0-9']+", text))


def _matches(keyword: str, text: str, tokens: FrozenSet[str]) -> bool:
    if " " in keyword:
        return keyword in text
    return keyword in tokens


def answer(message_text: str) -> str:
    """根据消息文本返回固定的指引文本。"""

    text = (message_text or "").strip().lower()
    if not text:
        return GREETING
    tokens = _tokenize(text)
    for keywords, reply in RULES:
        if any(_matches(k, text, tokens) for k in keywords):
            return reply
    return GENERIC_HELP
