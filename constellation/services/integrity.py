from typing import Dict, Iterable, List, Set, Tuple

import networkx as nx

from constellation.domain.models import Edge, Skill


def check_prereq_cycles(edges: Iterable[Edge]) -> List[List[str]]:
    g = nx.DiGraph()
    for e in edges:
        g.add_edge(e.source, e.target)
    return [list(c) for c in nx.simple_cycles(g)]

def cycle_edges(cycles: List[List[str]]) -> List[Tuple[str, str]]:
    violations: List[Tuple[str, str]] = []
    for cyc in cycles:
        if len(cyc) == 1:
            violations.append((cyc[0], cyc[0]))
        else:
            for i in range(len(cyc)):
                violations.append((cyc[i], cyc[(i + 1) % len(cyc)]))
    return violations

def would_create_cycle(edges: Iterable[Edge], source_id: str, target_id: str) -> bool:
    if source_id == target_id:
        return True
    g = nx.DiGraph()
    for e in edges:
        g.add_edge(e.source, e.target)
    if target_id not in g or source_id not in g:
        return False
    return nx.has_path(g, target_id, source_id)

def check_dangling_edges(skills: Iterable[Skill], edges: Iterable[Edge]) -> List[str]:
    ids: Set[str] = {s.id for s in skills}
    out = []
    for e in edges:
        if e.source not in ids or e.target not in ids:
            out.append(e.id)
    return sorted(out)

def check_isolated_skills(skills: Iterable[Skill], edges: Iterable[Edge]) -> List[str]:
    """Skills with neither prerequisites nor dependents."""
    connected: Set[str] = set()
    for e in edges:
        connected.add(e.source)
        connected.add(e.target)
    return [s.id for s in skills if s.id not in connected]

def integrity_check_graph(skills: List[Skill], edges: List[Edge]) -> Dict:
    cycles = check_prereq_cycles(edges)
    dangling = check_dangling_edges(skills, edges)
    isolated = check_isolated_skills(skills, edges) if len(skills) > 1 else []
    ok = (len(cycles) == 0) and (len(dangling) == 0)
    return {
        "ok": ok,
        "prereq_cycles": cycles,
        "cycle_edges": cycle_edges(cycles),
        "dangling_edges": dangling,
        "isolated_skills": isolated,
    }
