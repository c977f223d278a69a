"""
Zen Bonsai - Growing a Tree from Seed to Masterpiece

Demonstrates the full pipeline for one tree:
1. Plant a seed with a fresh genetic identity
2. Tend it through the care loop (ticks, water, fertilizer)
3. Repot it at each stage, appending an evolution segment to its DNA
4. Regenerate the skeleton from the DNA and render it in 2D and 3D

Regenerating from the saved garden reproduces exactly the same trees.
"""

import argparse
from pathlib import Path

import numpy as np

from bonsai import care
from bonsai.canvas import save_tree
from bonsai.config import GrowthStage, GrowthStyle, Species
from bonsai.mesh import build_mesh
from bonsai.skeleton import generate
from bonsai.storage import Garden, load_garden, save_garden


def grow_to_master(tree, rng: np.random.Generator):
    """Tend a tree until it reaches the MASTER stage, yielding each stage."""
    yield tree
    while tree.stage < GrowthStage.MASTER:
        tree = care.run_ticks(tree, 20)
        tree = care.fertilize(care.water(tree))
        # Recover to full health before repotting
        while tree.health < 90:
            tree = care.fertilize(care.water(care.run_ticks(tree, 10)))
        min_age = care.DEFAULT_CARE.evolve_min_age[tree.stage]
        while tree.age < min_age:
            tree = care.fertilize(care.water(care.run_ticks(tree, 10)))
        tree, message = care.advance_stage(tree, rng=rng)
        print(f"  {message}")
        yield tree


def main() -> None:
    parser = argparse.ArgumentParser(description="Grow a bonsai from seed.")
    parser.add_argument("--species", default=Species.PINE.value,
                        choices=[s.value for s in Species])
    parser.add_argument("--seed", type=int, default=42,
                        help="Random seed for the genetic identity")
    parser.add_argument("--name", default="", help="Name for the tree")
    parser.add_argument("--out", default="renders", help="Output directory")
    args = parser.parse_args()

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    rng = np.random.default_rng(args.seed)

    print("\n" + "=" * 60)
    print("  ZEN BONSAI: Growing a tree from its DNA")
    print("=" * 60)

    garden = Garden()
    tree = care.rename(care.create_tree(Species(args.species), rng=rng), args.name)
    garden = garden.add(tree)

    for tree in grow_to_master(tree, rng):
        garden = garden.update_active(lambda _: tree)
        print(f"\nDNA: {' > '.join(tree.dna)}")

        skeleton = generate(tree.genetic_record())
        skeleton.print_summary()

        scene = build_mesh(skeleton)
        print(f"Mesh: {len(scene.segments)} segments, {len(scene.foliage)} foliage puffs")

        canvas_skeleton = generate(tree.genetic_record(), style=GrowthStyle.CANVAS)
        save_tree(str(out / f"{tree.species.value.lower()}_{tree.stage.name.lower()}.png"),
                  canvas_skeleton)

    # Shape the finished tree
    tree = care.wire(care.prune(tree))
    garden = garden.update_active(lambda _: tree)
    save_tree(str(out / f"{tree.species.value.lower()}_shaped.png"),
              generate(tree.genetic_record(), style=GrowthStyle.CANVAS))

    storage_path = out / "garden.json"
    save_garden(garden, storage_path)
    reloaded = load_garden(storage_path).active_tree()
    same = generate(reloaded.genetic_record()) == generate(tree.genetic_record())
    print(f"\nReloaded tree regenerates identically: {same}")


if __name__ == "__main__":
    main()
