"""
Couche domaine de Stash Curator.

Contient les entites du catalogue, les objets valeur (notes, plans
d'organisation) et les ports (interfaces abstraites) vers le monde exterieur.
Cette couche ne depend d'aucun adaptateur.
"""
