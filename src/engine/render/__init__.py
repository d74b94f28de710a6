"""
どこで: `engine.render` サブパッケージ。
何を: 投影・面生成と陰影・深度ソート合成・描画面（Protocol/記録/pyglet）を提供。
なぜ: 状態更新（engine.scene）と描画の責務を分離し、GUI 依存を pyglet_surface に局所化するため。
"""
