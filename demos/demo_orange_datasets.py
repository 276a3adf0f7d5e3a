import logging

import Orange.distance as odist
from Orange.data import Table

from razornet import RazorNetOptions, TqdmProgress
from razornet.pipeline import razor_net
from razornet.razor_orange import razor_net_orange


def compute_distance_matrix(table, metric="euclidean"):
    if metric == "euclidean":
        return odist.Euclidean(table)
    elif metric == "manhattan":
        return odist.Manhattan(table)
    elif metric == "hamming":
        return odist.Hamming(table)
    else:
        raise ValueError(f"Unknown metric: {metric}")


def print_network(result):
    g = result.graph
    print(f"{result.ntax} taxa, {g.number_of_nodes() - result.ntax} internal nodes, "
          f"{g.number_of_edges()} edges")
    for u, v, w in sorted(g.edges(data="weight")):
        lu = g.nodes[u].get("label", f"#{u}")
        lv = g.nodes[v].get("label", f"#{v}")
        print(f"  {lu:>20} -- {lv:<20} {w:.4f}")
    if result.mismatches:
        print(f"  {len(result.mismatches)} taxon pairs differ from the input distances")


# ----------------------------------------------------------------------
# 1. Iris (Euclidean)
# ----------------------------------------------------------------------

def demo_iris_euclidean():
    print("Demo 1: Iris (Euclidean)")

    table = Table("iris")

    s0 = [i for i in range(150) if table[i].get_class() == "Iris-setosa"][:5]
    s1 = [i for i in range(150) if table[i].get_class() == "Iris-versicolor"][:5]
    s2 = [i for i in range(150) if table[i].get_class() == "Iris-virginica"][:5]
    table = table[s0 + s1 + s2]

    dm = compute_distance_matrix(table, metric="euclidean")
    labels = [f"{inst.get_class()}-{i}" for i, inst in enumerate(table)]

    print_network(razor_net_orange(dm, labels=labels))


# ----------------------------------------------------------------------
# 2. Zoo (Manhattan)
# ----------------------------------------------------------------------

def demo_zoo_manhattan():
    print("Demo 2: Zoo (Manhattan)")

    table = Table("zoo")[:20]
    dm = compute_distance_matrix(table, metric="manhattan")

    name_var = None
    for var in table.domain.metas:
        if var.name.lower() == "name":
            name_var = var
            break

    if name_var is None:
        raise RuntimeError("Zoo dataset: could not find meta variable 'name'.")

    labels = [str(inst[name_var]) for inst in table]

    options = RazorNetOptions(graph_pruning=True, min_edge_length=1e-3)
    print_network(razor_net_orange(dm, labels=labels, options=options))


# ----------------------------------------------------------------------
# 3. Housing (Euclidean), with a progress bar
# ----------------------------------------------------------------------

def demo_housing_euclidean():
    print("Demo 3: Housing (Euclidean)")

    table = Table("housing")[:12]
    dm = compute_distance_matrix(table, metric="euclidean")
    labels = [f"h{i}" for i in range(len(table))]

    with TqdmProgress(desc="housing") as progress:
        result = razor_net(dm, labels, progress=progress)
    print_network(result)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    demo_iris_euclidean()
    demo_zoo_manhattan()
    demo_housing_euclidean()


if __name__ == "__main__":
    main()
