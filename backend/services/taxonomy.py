"""Skill taxonomy resolver: alias-aware lookup over a parent/child forest.

Skills are kept in an arena keyed by id. Parent and child links are ids,
so traversals are explicit queue walks with a visited set rather than
recursive object graphs, and hierarchy depth is unbounded.
"""

import logging
from collections import deque
from typing import Iterable

from models.schemas.skill import Skill, normalize_name
from services.errors import NotFoundError

logger = logging.getLogger(__name__)

SkillRef = int | str | Skill


class SkillTaxonomy:
    """Read-only skill forest with name/alias indexes.

    Safe to share between concurrent scorers: nothing is mutated after
    construction.
    """

    def __init__(self, skills: Iterable[Skill]) -> None:
        self._skills: dict[int, Skill] = {}
        for skill in skills:
            self._skills[skill.id] = skill

        self._parent: dict[int, int | None] = {
            sid: s.parent_id for sid, s in self._skills.items()
        }
        self._break_cycles()

        self._children: dict[int, list[int]] = {sid: [] for sid in self._skills}
        for sid in sorted(self._skills):
            pid = self._parent[sid]
            if pid is not None:
                self._children[pid].append(sid)

        self._by_name: dict[str, int] = {}
        self._by_alias: dict[str, list[int]] = {}
        for sid in sorted(self._skills):
            skill = self._skills[sid]
            self._by_name.setdefault(skill.normalized_name, sid)
            for alias in skill.aliases:
                self._by_alias.setdefault(alias, []).append(sid)

        logger.info("Skill taxonomy built with %d skills", len(self._skills))

    def _break_cycles(self) -> None:
        """Drop dangling parents and cut every parent cycle at the closing edge."""
        for sid in sorted(self._skills):
            path = [sid]
            on_path = {sid}
            current = self._parent[sid]
            while current is not None:
                if current not in self._skills:
                    logger.warning(
                        "Skill %d references unknown parent %d; treating as root",
                        path[-1], current,
                    )
                    self._parent[path[-1]] = None
                    break
                if current in on_path:
                    logger.warning(
                        "Skill hierarchy cycle through %d; cutting parent link of %d",
                        current, path[-1],
                    )
                    self._parent[path[-1]] = None
                    break
                path.append(current)
                on_path.add(current)
                current = self._parent[current]

    # -- lookup ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._skills)

    def __contains__(self, skill_id: int) -> bool:
        return skill_id in self._skills

    def get(self, skill_id: int) -> Skill | None:
        return self._skills.get(skill_id)

    def all(self) -> list[Skill]:
        return [self._skills[sid] for sid in sorted(self._skills)]

    def resolve(self, identifier: SkillRef | None) -> Skill | None:
        """Return the canonical skill for an id, name or alias, else None.

        Names win over aliases; an alias shared by several skills resolves
        to the lowest id.
        """
        if identifier is None or isinstance(identifier, bool):
            return None
        if isinstance(identifier, Skill):
            return self._skills.get(identifier.id)
        if isinstance(identifier, int):
            return self._skills.get(identifier)

        key = normalize_name(str(identifier))
        if not key:
            return None
        if key.isdigit() and int(key) in self._skills:
            return self._skills[int(key)]
        sid = self._by_name.get(key)
        if sid is not None:
            return self._skills[sid]
        ids = self._by_alias.get(key)
        if ids:
            return self._skills[ids[0]]
        return None

    def resolve_or_raise(self, identifier: SkillRef) -> Skill:
        skill = self.resolve(identifier)
        if skill is None:
            raise NotFoundError("skill", identifier)
        return skill

    def find_by_alias(self, alias: str) -> list[Skill]:
        return [self._skills[sid] for sid in self._by_alias.get(normalize_name(alias), [])]

    # -- hierarchy ---------------------------------------------------------

    def parent_of(self, skill_id: int) -> Skill | None:
        pid = self._parent.get(skill_id)
        return self._skills[pid] if pid is not None else None

    def children_of(self, skill_id: int) -> list[Skill]:
        return [self._skills[cid] for cid in self._children.get(skill_id, [])]

    def ancestors_of(self, skill_id: int) -> list[Skill]:
        """Chain from the direct parent up to the root."""
        chain: list[Skill] = []
        seen = {skill_id}
        current = self._parent.get(skill_id)
        while current is not None and current not in seen:
            seen.add(current)
            chain.append(self._skills[current])
            current = self._parent.get(current)
        return chain

    def descendants_of(self, skill_id: int) -> list[Skill]:
        """Whole subtree below a skill, breadth-first."""
        result: list[Skill] = []
        visited = {skill_id}
        queue: deque[int] = deque(self._children.get(skill_id, []))
        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            result.append(self._skills[current])
            queue.extend(self._children.get(current, []))
        return result

    def root_of(self, skill_id: int) -> int | None:
        if skill_id not in self._skills:
            return None
        ancestors = self.ancestors_of(skill_id)
        return ancestors[-1].id if ancestors else skill_id

    def is_ancestor(self, ancestor_id: int, skill_id: int) -> bool:
        return any(s.id == ancestor_id for s in self.ancestors_of(skill_id))

    def are_equivalent(self, a: SkillRef | None, b: SkillRef | None) -> bool:
        """Identical, ancestor/descendant of one another, or sharing an alias."""
        skill_a = self.resolve(a)
        skill_b = self.resolve(b)
        if skill_a is None or skill_b is None:
            return False
        if skill_a.id == skill_b.id:
            return True
        if self.is_ancestor(skill_a.id, skill_b.id) or self.is_ancestor(skill_b.id, skill_a.id):
            return True
        terms_a = {skill_a.normalized_name, *skill_a.aliases}
        terms_b = {skill_b.normalized_name, *skill_b.aliases}
        return bool(set(skill_a.aliases) & terms_b) or bool(set(skill_b.aliases) & terms_a)
