"""
Stash Curator - Curation d'un catalogue media personnel heberge par Stash.

Ce package note les entites du catalogue (performers, studios, tags, scenes)
selon les signaux d'engagement, selectionne les scenes favorites qui tiennent
dans un espace disque donne, et reorganise les fichiers de la bibliotheque
selon un modele de nommage defini par l'utilisateur.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, ports, objets valeur)
- services/ : Couche application (notation, selection, organisation)
- adapters/ : Couche infrastructure (CLI, client GraphQL Stash, systeme de fichiers)
"""

__version__ = "0.1.0"
