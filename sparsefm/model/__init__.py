# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Parameter model and the learning components that act on it.

  - sizing: family table mapping dimensions to parameter-vector length
  - core: ``Model``, the owned parameter vector plus metadata and checkpoint
  - score: linear / fm / ffm score functions
  - loss: squared / cross_entropy / hinge
  - updater: sgd / adagrad / momentum update rules

Parameter layout shared by every family (index 0 is the bias):

  [ bias | w_1 .. w_F | latent blocks ]
     0     1 .. F       F+1 ..
"""
