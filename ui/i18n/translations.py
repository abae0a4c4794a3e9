# translations.py - 界面文本翻译表
"""
键为英文原文；en_US 缺省时直接返回原文
"""

TRANSLATIONS = {
    "en_US": {},
    "zh_CN": {
        "Ready": "就绪",
        "File List": "文件列表",
        "No.": "序号",
        "Filename": "文件名",
        "Size (MB)": "大小 (MB)",
        "Status": "状态",
        "Add Files...": "添加文件...",
        "Remove Selected": "移除所选",
        "Clear All": "清空列表",
        "Decrypt...": "解密...",
        "Encrypt...": "加密...",
        "Cancel": "取消",
        "Cancelling...": "正在取消...",
        "Checking...": "检查中...",
        "Encrypted": "已加密",
        "Not Encrypted": "未加密",
        "Unreadable": "无法读取",
        "Processing...": "处理中...",
        "Succeeded": "成功",
        "Failed": "失败",
        "Select PDF Files": "选择 PDF 文件",
        "Choose a folder to save the decrypted PDF files": "选择保存解密文件的文件夹",
        "Choose a folder to save the encrypted PDF files": "选择保存加密文件的文件夹",
        "Enter PDF Password": "输入 PDF 密码",
        "Please enter the password for the selected PDF files.": "请输入所选 PDF 文件的密码。",
        "Set Encryption Password": "设置加密密码",
        "Enter a password to encrypt the PDF files. The same password will be applied to all files.":
            "请输入用于加密 PDF 文件的密码，所有文件将使用同一密码。",
        "Password": "密码",
        "Confirm Password": "确认密码",
        "Show password": "显示密码",
        "Strength: ": "强度：",
        "weak": "弱",
        "fair": "一般",
        "good": "良好",
        "strong": "强",
        "Decryption Failed - Try Different Password": "解密失败 - 请尝试其他密码",
        "Encryption Failed - Try Different Password": "加密失败 - 请尝试其他密码",
        "Some or all files failed. Please try a different password or cancel to stop.":
            "部分或全部文件处理失败，请尝试其他密码或取消。",
        "Processing Complete": "处理完成",
        "Cannot Start": "无法开始",
        "File Details": "文件详情",
        "Invalid Files": "无效文件",
        "Only PDF files can be imported.": "只能导入 PDF 文件。",
        "Processing": "正在处理",
    },
}
