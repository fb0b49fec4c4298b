"""
Algorithm Knowledge Base

Validated, read-only registry of the topics the assistant can explain.
Each entry carries its explanation, metadata facts and one snippet per
variant; the default-variant snippet is mandatory and checked on load.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from leetmetric_assistant.variants import DEFAULT_VARIANT, Variant

logger = logging.getLogger(__name__)


class KnowledgeBaseError(ValueError):
    """Raised when the registry is incomplete or inconsistent."""


class Topic(Enum):
    """Knowledge topics, in no particular order."""
    BINARY_SEARCH = "binary_search"
    DYNAMIC_PROGRAMMING = "dynamic_programming"
    TWO_POINTERS = "two_pointers"
    STUDY_PLAN = "study_plan"
    INTERVIEW = "interview"
    TIME_COMPLEXITY = "time_complexity"
    DATA_STRUCTURES = "data_structures"
    PROBLEM_SOLVING = "problem_solving"
    HELP = "help"


@dataclass(frozen=True)
class KnowledgeEntry:
    """
    One topic record.

    metadata holds ordered (label, value) facts such as complexities or use
    cases. When is_code is False the snippets are prose and are rendered
    without a code fence.
    """
    topic: Topic
    title: str
    explanation: str
    snippets: Mapping[Variant, str]
    metadata: Tuple[Tuple[str, str], ...] = ()
    tip: Optional[str] = None
    closing: Optional[str] = None
    snippet_label: str = "Implementation"
    is_code: bool = True

    def __post_init__(self):
        default_snippet = self.snippets.get(DEFAULT_VARIANT)
        if not default_snippet or not default_snippet.strip():
            raise KnowledgeBaseError(
                f"Entry {self.topic.value!r} has no snippet for default variant "
                f"{DEFAULT_VARIANT.value!r}"
            )
        for key in self.snippets:
            if not isinstance(key, Variant):
                raise KnowledgeBaseError(f"Entry {self.topic.value!r} has unknown variant key {key!r}")
        object.__setattr__(self, "snippets", MappingProxyType(dict(self.snippets)))

    def snippet_for(self, variant: Variant) -> Tuple[Variant, str]:
        """
        Snippet for a variant, falling back to the default variant.

        Returns:
            (variant actually used, snippet text)
        """
        if variant in self.snippets:
            return variant, self.snippets[variant]
        return DEFAULT_VARIANT, self.snippets[DEFAULT_VARIANT]


class KnowledgeBase:
    """Immutable topic registry shared by the matcher and the renderer."""

    def __init__(self, entries: Iterable[KnowledgeEntry]):
        registry: Dict[Topic, KnowledgeEntry] = {}
        for entry in entries:
            if entry.topic in registry:
                raise KnowledgeBaseError(f"Duplicate entry for topic {entry.topic.value!r}")
            registry[entry.topic] = entry

        missing = [topic.value for topic in Topic if topic not in registry]
        if missing:
            raise KnowledgeBaseError(f"Knowledge base is missing topics: {', '.join(missing)}")

        self._entries: Mapping[Topic, KnowledgeEntry] = MappingProxyType(registry)
        logger.info(f"✅ [KnowledgeBase] Loaded {len(registry)} entries")

    def lookup(self, topic: Union[Topic, str]) -> Optional[KnowledgeEntry]:
        """Get the entry for a topic or its string identifier."""
        if isinstance(topic, str):
            try:
                topic = Topic(topic.strip().lower())
            except ValueError:
                return None
        return self._entries.get(topic)

    @property
    def topics(self) -> Tuple[Topic, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[KnowledgeEntry]:
        return iter(self._entries.values())

    def __contains__(self, topic) -> bool:
        return self.lookup(topic) is not None


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


# ==================== Registry ====================

_BINARY_SEARCH = KnowledgeEntry(
    topic=Topic.BINARY_SEARCH,
    title="Binary Search Algorithm",
    explanation=(
        "Binary search is an efficient algorithm for searching sorted arrays. "
        "It works by repeatedly dividing the search space in half."
    ),
    metadata=(
        ("Time Complexity", "O(log n)"),
        ("Space Complexity", "O(1)"),
    ),
    tip="Always remember to check if the array is sorted first!",
    snippets={
        Variant.PYTHON: """def binary_search(arr, target):
    left, right = 0, len(arr) - 1

    while left <= right:
        mid = (left + right) // 2
        if arr[mid] == target:
            return mid
        elif arr[mid] < target:
            left = mid + 1
        else:
            right = mid - 1

    return -1""",
        Variant.JAVASCRIPT: """function binarySearch(arr, target) {
    let left = 0, right = arr.length - 1;

    while (left <= right) {
        const mid = Math.floor((left + right) / 2);
        if (arr[mid] === target) return mid;
        if (arr[mid] < target) left = mid + 1;
        else right = mid - 1;
    }

    return -1;
}""",
        Variant.JAVA: """public static int binarySearch(int[] arr, int target) {
    int left = 0, right = arr.length - 1;

    while (left <= right) {
        int mid = left + (right - left) / 2;
        if (arr[mid] == target) return mid;
        if (arr[mid] < target) left = mid + 1;
        else right = mid - 1;
    }

    return -1;
}""",
        Variant.CPP: """int binarySearch(const std::vector<int>& arr, int target) {
    int left = 0, right = static_cast<int>(arr.size()) - 1;

    while (left <= right) {
        int mid = left + (right - left) / 2;
        if (arr[mid] == target) return mid;
        if (arr[mid] < target) left = mid + 1;
        else right = mid - 1;
    }

    return -1;
}""",
    },
)

_DYNAMIC_PROGRAMMING = KnowledgeEntry(
    topic=Topic.DYNAMIC_PROGRAMMING,
    title="Dynamic Programming (DP)",
    explanation=(
        "Dynamic Programming is a method for solving complex problems by "
        "breaking them down into simpler subproblems."
    ),
    metadata=(
        ("Approach", "1. Define the problem recursively\n"
                     "2. Identify overlapping subproblems\n"
                     "3. Store solutions to subproblems\n"
                     "4. Build up solutions bottom-up"),
        ("Common Examples", "Fibonacci, Longest Common Subsequence, Knapsack Problem"),
    ),
    tip="Start with the recursive solution, then optimize with memoization or tabulation.",
    snippet_label="Tabulation Example",
    snippets={
        Variant.PYTHON: """def climb_stairs(n):
    if n <= 2:
        return n
    dp = [0] * (n + 1)
    dp[1], dp[2] = 1, 2
    for i in range(3, n + 1):
        dp[i] = dp[i - 1] + dp[i - 2]
    return dp[n]""",
        Variant.JAVASCRIPT: """function climbStairs(n) {
    if (n <= 2) return n;
    const dp = new Array(n + 1).fill(0);
    dp[1] = 1;
    dp[2] = 2;
    for (let i = 3; i <= n; i++) {
        dp[i] = dp[i - 1] + dp[i - 2];
    }
    return dp[n];
}""",
        Variant.JAVA: """public static int climbStairs(int n) {
    if (n <= 2) return n;
    int[] dp = new int[n + 1];
    dp[1] = 1;
    dp[2] = 2;
    for (int i = 3; i <= n; i++) {
        dp[i] = dp[i - 1] + dp[i - 2];
    }
    return dp[n];
}""",
        Variant.CPP: """int climbStairs(int n) {
    if (n <= 2) return n;
    std::vector<int> dp(n + 1, 0);
    dp[1] = 1;
    dp[2] = 2;
    for (int i = 3; i <= n; i++) {
        dp[i] = dp[i - 1] + dp[i - 2];
    }
    return dp[n];
}""",
    },
)

_TWO_POINTERS = KnowledgeEntry(
    topic=Topic.TWO_POINTERS,
    title="Two Pointers Technique",
    explanation=(
        "Two pointers technique uses two pointers moving towards each other or "
        "in the same direction to solve problems efficiently."
    ),
    metadata=(
        ("Common Use Cases", "Sorted arrays, palindromes, sum problems, sliding window"),
    ),
    snippet_label="Example Implementation",
    snippets={
        Variant.PYTHON: """def two_sum_sorted(arr, target):
    left, right = 0, len(arr) - 1

    while left < right:
        current_sum = arr[left] + arr[right]
        if current_sum == target:
            return [left, right]
        elif current_sum < target:
            left += 1
        else:
            right -= 1

    return []""",
        Variant.JAVASCRIPT: """function twoSumSorted(arr, target) {
    let left = 0, right = arr.length - 1;

    while (left < right) {
        const sum = arr[left] + arr[right];
        if (sum === target) return [left, right];
        if (sum < target) left++;
        else right--;
    }

    return [];
}""",
        Variant.JAVA: """public static int[] twoSumSorted(int[] arr, int target) {
    int left = 0, right = arr.length - 1;

    while (left < right) {
        int sum = arr[left] + arr[right];
        if (sum == target) return new int[] {left, right};
        if (sum < target) left++;
        else right--;
    }

    return new int[0];
}""",
    },
)

_STUDY_PLAN = KnowledgeEntry(
    topic=Topic.STUDY_PLAN,
    title="📚 LeetCode Study Plans",
    explanation="Pick the track that matches where you are today.",
    is_code=False,
    closing="Which level matches your current skills?",
    snippets={
        DEFAULT_VARIANT: "\n\n".join([
            "**For Beginners:**\n" + _bullets([
                "Start with Arrays and Strings",
                "Learn basic sorting algorithms",
                "Practice with easy problems daily",
                "Focus on understanding time complexity",
            ]),
            "**For Intermediate:**\n" + _bullets([
                "Master Trees and Graphs",
                "Learn Dynamic Programming patterns",
                "Practice medium difficulty problems",
                "Study system design basics",
            ]),
            "**For Advanced:**\n" + _bullets([
                "Advanced algorithms (segment trees, etc.)",
                "Competitive programming techniques",
                "Hard problems and optimization",
                "System design and scalability",
            ]),
        ]),
    },
)

_INTERVIEW = KnowledgeEntry(
    topic=Topic.INTERVIEW,
    title="🎯 Coding Interview Preparation",
    explanation="Interviews reward steady practice and clear communication.",
    is_code=False,
    closing="**Remember:** Practice makes perfect! Start with easy problems and gradually increase difficulty.",
    snippets={
        DEFAULT_VARIANT: "\n\n".join([
            "**Preparation Strategy:**\n" + _bullets([
                "Practice coding 1-2 hours daily",
                "Mock interviews with peers",
                "Review fundamental concepts",
                "Learn to explain your thought process",
                "Practice on whiteboard/paper",
            ]),
            "**During the Interview:**\n" + _bullets([
                "Always clarify the problem first",
                "Think out loud during coding",
                "Start with brute force, then optimize",
                "Test your code with examples",
                "Discuss time and space complexity",
            ]),
        ]),
    },
)

_TIME_COMPLEXITY = KnowledgeEntry(
    topic=Topic.TIME_COMPLEXITY,
    title="⏰ Time Complexity (Big O) Guide",
    explanation="Big O describes how running time grows with input size.",
    is_code=False,
    snippets={
        DEFAULT_VARIANT: "**Common Complexities (Best to Worst):**\n" + _bullets([
            "**O(1)** - Constant: Array access, hash table lookup",
            "**O(log n)** - Logarithmic: Binary search, balanced tree operations",
            "**O(n)** - Linear: Simple loops, array traversal",
            "**O(n log n)** - Linearithmic: Efficient sorting (merge sort, quick sort)",
            "**O(n²)** - Quadratic: Nested loops, bubble sort",
            "**O(2^n)** - Exponential: Recursive fibonacci, subset generation",
        ]) + "\n\n**💡 Tips:**\n" + _bullets([
            "Always aim for the most efficient solution",
            "Consider trade-offs between time and space complexity",
            "Practice analyzing your code's complexity",
        ]),
    },
)

_DATA_STRUCTURES = KnowledgeEntry(
    topic=Topic.DATA_STRUCTURES,
    title="🏗️ Essential Data Structures",
    explanation="Choosing the right structure is half of most solutions.",
    is_code=False,
    closing="Which data structure would you like to learn more about?",
    snippets={
        DEFAULT_VARIANT: "\n\n".join([
            "**Arrays:** Contiguous memory locations storing elements of same type. O(1) access, O(n) search.",
            "**Linked Lists:** Linear data structure with nodes containing data and pointers. "
            "O(1) insertion/deletion at head.",
            "**Trees:** Hierarchical structure with nodes. Binary trees, BST, AVL, etc. "
            "Great for searching and sorting.",
            "**Graphs:** Networks of vertices and edges. Used for modeling relationships and pathfinding.",
        ]),
    },
)

_PROBLEM_SOLVING = KnowledgeEntry(
    topic=Topic.PROBLEM_SOLVING,
    title="🎯 Problem-Solving Strategy",
    explanation="Work through every problem in the same five steps.",
    is_code=False,
    snippets={
        DEFAULT_VARIANT: "\n\n".join([
            "**1. Understand the Problem**\n" + _bullets([
                "Read carefully and identify inputs/outputs",
                "Look for edge cases and constraints",
                "Ask clarifying questions",
            ]),
            "**2. Plan Your Approach**\n" + _bullets([
                "Start with brute force solution",
                "Think about optimizations",
                "Consider different data structures",
            ]),
            "**3. Code & Test**\n" + _bullets([
                "Write clean, readable code",
                "Test with given examples",
                "Check edge cases",
            ]),
            "**4. Optimize**\n" + _bullets([
                "Analyze time/space complexity",
                "Look for bottlenecks",
                "Consider alternative approaches",
            ]),
            "**5. Review & Learn**\n" + _bullets([
                "Understand why your solution works",
                "Learn from other solutions",
                "Practice similar problems",
            ]),
        ]),
    },
)

_HELP = KnowledgeEntry(
    topic=Topic.HELP,
    title="🤖 I'm here to help you with:",
    explanation="",
    is_code=False,
    closing="Just ask me anything about coding, algorithms, or LeetCode problems!",
    snippets={
        DEFAULT_VARIANT: _bullets([
            "**Algorithm explanations** (binary search, DP, graphs, etc.)",
            "**Data structure guidance** (arrays, trees, hash tables, etc.)",
            "**Problem-solving strategies** and techniques",
            "**Interview preparation** tips and mock questions",
            "**Study plans** tailored to your level",
            "**Code optimization** and complexity analysis",
            "**Debugging** assistance and best practices",
        ]),
    },
)

DEFAULT_ENTRIES: Tuple[KnowledgeEntry, ...] = (
    _BINARY_SEARCH,
    _DYNAMIC_PROGRAMMING,
    _TWO_POINTERS,
    _STUDY_PLAN,
    _INTERVIEW,
    _TIME_COMPLEXITY,
    _DATA_STRUCTURES,
    _PROBLEM_SOLVING,
    _HELP,
)


def build_knowledge_base(entries: Optional[Iterable[KnowledgeEntry]] = None) -> KnowledgeBase:
    """Build the registry; raises KnowledgeBaseError if it is incomplete."""
    return KnowledgeBase(DEFAULT_ENTRIES if entries is None else entries)
