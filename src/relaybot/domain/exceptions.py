"""Domain exceptions."""


class GeneratorError(Exception):
    """テキスト生成の往復が完了しなかった場合に発生する例外

    通信エラー、タイムアウト、成功以外のステータスなどを含む。
    発生した場合その回の応答は送信されない。
    """


class MessageDeliveryError(Exception):
    """メッセージを送信できない場合に発生する例外

    サーバーとの接続が切れている場合などに発生する。
    """

    def __init__(self, target: str, message: str = "") -> None:
        """初期化

        Args:
            target: 送信先のチャンネル名またはニック
            message: エラーメッセージ（オプション）
        """
        self.target = target
        super().__init__(message or f"Cannot deliver message to {target}")
