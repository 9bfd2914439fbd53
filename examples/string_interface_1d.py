import numpy as np
import matplotlib.pyplot as plt

from stringwave.modeling import InterfaceConfig, InterfaceSimulator, PulseSimulator

# -----------------------------
# Paramètres physiques
# -----------------------------
c1 = 300.0          # célérité à gauche de l'interface (m/s)
c2 = 150.0          # célérité à droite de l'interface (m/s)
k = 50              # noeud de l'interface
r = 0.8             # nombre de Courant de la région gauche
num_frames = 200

# -----------------------------
# Simulation (schéma saute-mouton explicite)
# -----------------------------
config = InterfaceConfig(left_speed=c1, right_speed=c2, interface_index=k, num_frames=num_frames)
simulator = InterfaceSimulator(config)
series = simulator.simulate(r)

# Corde homogène de référence, même nombre de Courant
reference = PulseSimulator().simulate(r, num_frames=num_frames)

# -----------------------------
# Énergie de gradient (somme des différences au carré)
# -----------------------------
energy = np.sum(np.diff(series.frames, axis=1) ** 2, axis=1)
energy_ref = np.sum(np.diff(reference.frames, axis=1) ** 2, axis=1)

# -----------------------------
# Instantanés et énergie
# -----------------------------
fig, (ax_snap, ax_energy) = plt.subplots(1, 2, figsize=(12, 5))

snapshots = [0, 60, 120, 180]
for idx, n in enumerate(snapshots):
    ax_snap.plot(
        series.positions,
        series[n] + 0.6 * idx,
        color="royalblue",
        linewidth=1.5,
    )
    ax_snap.text(series.positions[-1], 0.6 * idx, f" n={n}", va="center")
# end for
ax_snap.axvline(config.interface_position, color="gray", linestyle="--")
ax_snap.set_xlabel("Position (m)")
ax_snap.set_yticks([])
ax_snap.set_title(f"Réflexion et transmission (c₁={c1:g} m/s, c₂={c2:g} m/s)")

ax_energy.plot(np.arange(series.num_frames), energy, color="crimson", label="deux milieux")
ax_energy.plot(np.arange(reference.num_frames), energy_ref, color="silver", label="corde homogène")
ax_energy.set_xlabel("Pas de temps n")
ax_energy.set_ylabel("Σ (u[i+1] - u[i])²")
ax_energy.legend()
ax_energy.grid(True, alpha=0.3)

plt.tight_layout()
plt.show()
