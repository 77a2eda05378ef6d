"""
Example: MinFill elimination cliques and a junction tree for an n x n grid.
"""

import numpy as np

from daibp.elimination import junction_tree, tree_width
from daibp.solver import elimination_cliques
from daibp.topology import ClusterGraph, FactorGraph


def main(n: int = 4):
    var_domains = {f"X{r}{c}": 2 for r in range(n) for c in range(n)}
    pair = np.ones((2, 2))
    factors = {}
    for r in range(n):
        for c in range(n):
            if c + 1 < n:
                factors[f"h{r}{c}"] = ((f"X{r}{c}", f"X{r}{c + 1}"), pair)
            if r + 1 < n:
                factors[f"v{r}{c}"] = ((f"X{r}{c}", f"X{r + 1}{c}"), pair)

    cliques = elimination_cliques(var_domains, factors)
    print(f"{n}x{n} grid: {len(cliques)} elimination cliques")
    for clique in cliques:
        print("  " + ",".join(clique))

    # junction tree over the same cliques, by label
    fg, _ = FactorGraph.from_tables(var_domains, factors)
    elim = ClusterGraph(fg.clusters()).var_elim_min_fill()
    tree = junction_tree(elim.clusters)
    print(f"junction tree: {tree.number_of_nodes()} cliques, width {tree_width(elim.clusters)}")
    for a, b, data in tree.edges(data=True):
        print(f"  {tree.nodes[a]['clique']} -- {tree.nodes[b]['clique']}  sep {data['separator']}")


if __name__ == "__main__":
    main()
