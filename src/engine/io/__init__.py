"""
どこで: `engine.io` サブパッケージ（入力）。
何を: ポインタ/ホイール/キー由来の入力を Scene 向け intent に変換する入口。
なぜ: 入力デバイス依存を隔離し、描画ループからは intent キューだけを参照させるため。
"""
